# File: skinsage/features/ingestion/service/job_handler.py
import logging
from typing import Optional
from uuid import UUID

from skinsage.features.media_storage.domain.interfaces import IObjectStorage
from skinsage.features.media_storage.service.api import build_object_storage
from .orchestrator import IngestionOrchestrator

logger = logging.getLogger(__name__)

class ScanIngestionHandler:
    """
    Worker for JobType.SCAN_INGESTION.
    """

    def __init__(self, storage: Optional[IObjectStorage] = None):
        self.storage = storage

    def handle(self, scan_id: UUID, params: dict) -> dict:
        logger.info(f"Processing Scan Ingestion for Scan: {scan_id}")

        # Allow overriding the worker count via job params
        orchestrator = IngestionOrchestrator(
            self.storage or build_object_storage(),
            max_workers=params.get("max_workers")
        )
        scan = orchestrator.ingest(scan_id)

        return {
            "status": scan.status.value,
            "quality_flags": scan.quality_flags,
            "missing_angles": [a.value for a in scan.missing_angles]
        }
