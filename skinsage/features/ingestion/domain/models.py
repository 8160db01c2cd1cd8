# File: skinsage/features/ingestion/domain/models.py
from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from skinsage.core.common.enums import ScanAngle
from skinsage.features.media_storage.domain.models import WriteTarget
from skinsage.features.quality.domain.models import QualityResult

@dataclass(frozen=True)
class UploadRequestItem:
    """One angle the client is about to upload."""
    angle: ScanAngle
    content_type: str
    checksum: Optional[str] = None

@dataclass(frozen=True)
class IssuedUpload:
    angle: ScanAngle
    upload_target: WriteTarget
    storage_key: str
    display_url: str

@dataclass
class ImageOutcome:
    """
    Result of evaluating one recorded image during an ingestion pass.
    `analysis` is None whenever scoring did not complete.
    """
    angle: ScanAngle
    image_id: UUID
    flags: List[str] = field(default_factory=list)
    analysis: Optional[QualityResult] = None
