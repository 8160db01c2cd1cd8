# File: skinsage/features/scans/domain/interfaces.py
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID

from skinsage.core.common.enums import ScanAngle, ScanStatus
from .models import Scan, ScanImage, AngleDeclaration, ImageAnalysisRecord

class IScanRepository(ABC):
    """
    Contract for Scan / ScanImage persistence.
    Every write is its own transaction.
    """

    @abstractmethod
    def get_scan(self, scan_id: UUID) -> Optional[Scan]:
        """Returns the scan with its images, or None."""
        pass

    @abstractmethod
    def create_scan(self,
                    patient_id: str,
                    captured_at: Optional[datetime],
                    angles: Sequence[AngleDeclaration]) -> Scan:
        pass

    @abstractmethod
    def list_scans(self, patient_id: Optional[str] = None) -> List[Scan]:
        """Newest capture first."""
        pass

    @abstractmethod
    def upsert_image(self,
                     scan_id: UUID,
                     angle: ScanAngle,
                     storage_key: str,
                     url: str,
                     checksum: Optional[str]) -> ScanImage:
        """
        Atomic insert-or-update keyed by (scan_id, angle).
        Overwrites storage_key, url and checksum of an existing row.
        """
        pass

    @abstractmethod
    def list_image_angles(self, scan_id: UUID) -> List[ScanAngle]:
        pass

    @abstractmethod
    def update_missing_angles(self, scan_id: UUID, missing_angles: Sequence[ScanAngle]) -> None:
        pass

    @abstractmethod
    def save_image_analysis(self, image_id: UUID, analysis: ImageAnalysisRecord) -> None:
        pass

    @abstractmethod
    def finalize_ingestion(self,
                           scan_id: UUID,
                           quality_flags: Sequence[str],
                           missing_angles: Sequence[ScanAngle],
                           status: ScanStatus) -> Scan:
        """
        Writes flags, missing angles and status in ONE transaction so
        readers never see a new flag set with a stale status.
        """
        pass

    @abstractmethod
    def set_ingest_job(self, scan_id: UUID, job_id: UUID) -> None:
        pass
