# File: skinsage/core/common/angles.py

from typing import Iterable, List, Union

from .enums import ScanAngle, REQUIRED_ANGLES
from .exceptions import UnsupportedAngleError


def parse_angle(value: Union[ScanAngle, str]) -> ScanAngle:
    """Accepts an enum member or its string value ('left45')."""
    if isinstance(value, ScanAngle):
        return value
    try:
        return ScanAngle(value)
    except ValueError:
        raise UnsupportedAngleError(f"Unsupported scan angle: {value!r}") from None


def compute_missing_angles(present: Iterable[ScanAngle]) -> List[ScanAngle]:
    """
    Required angles with no recorded image, in canonical order.
    Always recomputed from the recorded angles, never edited by hand.
    """
    present_set = set(present)
    return [angle for angle in REQUIRED_ANGLES if angle not in present_set]
