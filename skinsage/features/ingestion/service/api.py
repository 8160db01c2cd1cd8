# File: skinsage/features/ingestion/service/api.py
from typing import Iterable, List, Optional
from uuid import UUID

from skinsage.features.media_storage.domain.interfaces import IObjectStorage
from skinsage.features.media_storage.service.api import build_object_storage
from skinsage.features.scans.domain.models import Scan
from ..domain.models import IssuedUpload
from .orchestrator import IngestionOrchestrator
from .upload_targets import UploadTargetIssuer, ItemInput

def issue_upload_targets(scan_id: UUID,
                         items: Iterable[ItemInput],
                         storage: Optional[IObjectStorage] = None) -> List[IssuedUpload]:
    """
    Public API: issues write targets for the given angles of a scan.
    """
    issuer = UploadTargetIssuer(storage or build_object_storage())
    return issuer.issue(scan_id, items)

def ingest_scan_media(scan_id: UUID, storage: Optional[IObjectStorage] = None) -> Scan:
    """
    Public API: runs a full ingestion pass and returns the updated scan.
    """
    orchestrator = IngestionOrchestrator(storage or build_object_storage())
    return orchestrator.ingest(scan_id)
