# File: skinsage/features/scans/domain/models.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from skinsage.core.common.enums import ScanAngle, ScanStatus

@dataclass
class ScanImage:
    """
    A single angle of a scan, detached from the database session.
    Scores stay None until ingestion has run.
    """
    id: UUID
    scan_id: UUID
    angle: ScanAngle
    storage_key: Optional[str] = None
    url: Optional[str] = None
    checksum: Optional[str] = None
    blur_score: Optional[float] = None
    light_score: Optional[float] = None
    pose_ok: Optional[bool] = None
    landmarks: Optional[Dict[str, Any]] = None

@dataclass
class Scan:
    id: UUID
    patient_id: str
    captured_at: datetime
    status: ScanStatus
    quality_flags: List[str] = field(default_factory=list)
    missing_angles: List[ScanAngle] = field(default_factory=list)
    images: List[ScanImage] = field(default_factory=list)
    ingest_job_id: Optional[UUID] = None

    def image_for(self, angle: ScanAngle) -> Optional[ScanImage]:
        for image in self.images:
            if image.angle == angle:
                return image
        return None

@dataclass(frozen=True)
class AngleDeclaration:
    """An angle announced at scan creation, optionally with the client checksum."""
    angle: ScanAngle
    checksum: Optional[str] = None

@dataclass(frozen=True)
class ImageAnalysisRecord:
    """Quality outputs to be written onto a ScanImage row."""
    blur_score: float
    light_score: float
    pose_ok: bool
    landmarks: Dict[str, Any]
