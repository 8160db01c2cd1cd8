# File: skinsage/features/ingestion/service/status.py
from typing import Iterable, Sequence

from skinsage.core.common.enums import ScanAngle, ScanStatus
from skinsage.core.common.flags import CHECKSUM_MISMATCH, QualityFlagSet

def resolve_status(quality_flags: Iterable[str], missing_angles: Sequence[ScanAngle]) -> ScanStatus:
    """
    Scan status from ingestion evidence:
    1. any checksum mismatch -> REJECTED
    2. any missing angle     -> PROCESSING
    3. otherwise             -> COMPLETE

    blur / low_light / pose flags are advisory and never block COMPLETE.
    """
    if not isinstance(quality_flags, QualityFlagSet):
        quality_flags = QualityFlagSet(quality_flags)

    if quality_flags.has_prefix(CHECKSUM_MISMATCH):
        return ScanStatus.REJECTED
    if missing_angles:
        return ScanStatus.PROCESSING
    return ScanStatus.COMPLETE
