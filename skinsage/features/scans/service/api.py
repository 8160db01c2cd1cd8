# File: skinsage/features/scans/service/api.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Mapping, Optional, Union
from uuid import UUID

from skinsage.core.common.angles import parse_angle
from skinsage.core.common.exceptions import ScanNotFoundError
from ..data.repository import SqlScanRepo
from ..domain.interfaces import IScanRepository
from ..domain.models import Scan, AngleDeclaration

logger = logging.getLogger(__name__)

AngleInput = Union[AngleDeclaration, Mapping[str, Optional[str]]]


class ScanRecordService:
    """
    Facade for plain scan records: creation, lookup and listing.
    Quality and status fields are owned by the ingestion feature.
    """

    def __init__(self, repo: Optional[IScanRepository] = None):
        self.repo = repo or SqlScanRepo()

    def create_scan(self,
                    patient_id: str,
                    angles: Iterable[AngleInput] = (),
                    captured_at: Optional[datetime] = None) -> Scan:
        """
        Creates a PENDING scan with one (not yet uploaded) image row per
        declared angle. Unknown angle names raise UnsupportedAngleError.
        """
        declarations = [self._to_declaration(item) for item in angles]
        scan = self.repo.create_scan(patient_id, captured_at, declarations)
        logger.info(f"Created scan {scan.id} for patient {patient_id} "
                    f"({len(scan.images)} angles declared, {len(scan.missing_angles)} missing)")
        return scan

    def get_scan(self, scan_id: UUID) -> Scan:
        scan = self.repo.get_scan(scan_id)
        if not scan:
            raise ScanNotFoundError(scan_id)
        return scan

    def list_scans(self, patient_id: Optional[str] = None) -> List[Scan]:
        return self.repo.list_scans(patient_id)

    def patient_needs_scan(self,
                           patient_id: str,
                           threshold_days: int = 30,
                           now: Optional[datetime] = None) -> bool:
        """True when the patient has never been scanned or the latest scan is older than the threshold."""
        scans = self.repo.list_scans(patient_id)
        if not scans:
            return True

        latest = max(scan.captured_at for scan in scans)
        if latest.tzinfo is None:
            # SQLite drops tzinfo; everything is stored as UTC.
            latest = latest.replace(tzinfo=timezone.utc)

        now = now or datetime.now(timezone.utc)
        return now - latest > timedelta(days=threshold_days)

    @staticmethod
    def _to_declaration(item: AngleInput) -> AngleDeclaration:
        if isinstance(item, AngleDeclaration):
            return item
        return AngleDeclaration(angle=parse_angle(item["angle"]), checksum=item.get("checksum"))
