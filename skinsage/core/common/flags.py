# File: skinsage/core/common/flags.py

from typing import Iterable, Iterator, List, Union

from .enums import ScanAngle

# Flag kinds recorded against a scan. The full tag is "<kind>:<angle>".
MISSING_STORAGE = "missing_storage"
MISSING_OBJECT = "missing_object"
CHECKSUM_MISMATCH = "checksum_mismatch"
BLUR = "blur"
LOW_LIGHT = "low_light"
POSE = "pose"
PROCESSING_ERROR = "processing_error"
MISSING_ANGLE = "missing_angle"


def angle_flag(kind: str, angle: Union[ScanAngle, str]) -> str:
    """Builds a tag like 'blur:left45'."""
    value = angle.value if isinstance(angle, ScanAngle) else angle
    return f"{kind}:{value}"


class QualityFlagSet:
    """
    Insertion-ordered set of quality tags.
    Adding a tag twice keeps the first position, so output is deterministic.
    """

    def __init__(self, flags: Iterable[str] = ()):
        self._flags = dict.fromkeys(flags)

    def add(self, flag: str) -> None:
        self._flags.setdefault(flag, None)

    def add_for(self, kind: str, angle: Union[ScanAngle, str]) -> None:
        self.add(angle_flag(kind, angle))

    def update(self, flags: Iterable[str]) -> None:
        for flag in flags:
            self.add(flag)

    def has_prefix(self, prefix: str) -> bool:
        return any(flag.startswith(prefix) for flag in self._flags)

    def to_list(self) -> List[str]:
        return list(self._flags)

    def __contains__(self, flag: object) -> bool:
        return flag in self._flags

    def __iter__(self) -> Iterator[str]:
        return iter(self._flags)

    def __len__(self) -> int:
        return len(self._flags)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QualityFlagSet):
            return set(self._flags) == set(other._flags)
        return NotImplemented

    def __repr__(self) -> str:
        return f"QualityFlagSet({self.to_list()!r})"
