# File: skinsage/core/jobs/manager.py

import logging
from typing import Optional
from uuid import UUID
from datetime import datetime, timezone
from skinsage.core.database.connection import SessionLocal
from skinsage.core.common.exceptions import ScanNotFoundError
from skinsage.features.scans.data.repository import SqlScanRepo
from skinsage.features.scans.domain.interfaces import IScanRepository
from .models import JobModel
from .types import JobType, JobStatus

logger = logging.getLogger(__name__)

class JobManager:
    """
    The Central Dispatcher.
    It doesn't know *how* to do the job, but it knows *who* can.
    """

    def __init__(self,
                 handlers: Optional[dict] = None,
                 session_factory=SessionLocal,
                 scan_repo: Optional[IScanRepository] = None):
        # JobType -> object with .handle(scan_id, params). Empty means lazy defaults.
        self.handlers = handlers or {}
        self.session_factory = session_factory
        self.scan_repo = scan_repo or SqlScanRepo(session_factory)

    def submit_job(self, scan_id: UUID, job_type: JobType, params: Optional[dict] = None) -> UUID:
        """Create a Job Record in PENDING state and link it to the scan."""
        if not self.scan_repo.get_scan(scan_id):
            raise ScanNotFoundError(scan_id)

        with self.session_factory() as db:
            job = JobModel(scan_id=scan_id, job_type=job_type, payload=params or {})
            db.add(job)
            db.commit()
            db.refresh(job)
            job_id = job.id

        if job_type == JobType.SCAN_INGESTION:
            self.scan_repo.set_ingest_job(scan_id, job_id)

        logger.info(f"Job Submitted: {job_id} [{job_type.value}] for scan {scan_id}")
        return job_id

    def run_job(self, job_id: UUID):
        """
        Executes a specific job by routing it to the appropriate feature handler.
        """
        with self.session_factory() as db:
            job = db.get(JobModel, job_id)
            if not job:
                logger.error(f"Job {job_id} not found.")
                return

            # Update Status -> PROCESSING
            job.status = JobStatus.PROCESSING
            job.started_at = datetime.now(timezone.utc)
            db.commit()

            try:
                logger.info(f"Starting Job {job_id} ({job.job_type.value})...")

                result = self._route_to_feature(job)

                # Update Status -> COMPLETED
                job.result_meta = result
                job.status = JobStatus.COMPLETED
                logger.info(f"Job {job_id} Completed successfully.")

            except NotImplementedError as e:
                # Configuration error
                job.status = JobStatus.FAILED
                job.error_message = f"Configuration Error: {str(e)}"
                logger.error(f"Job {job_id} Failed: {e}")

            except Exception as e:
                # Execution error
                job.status = JobStatus.FAILED
                job.error_message = str(e)
                logger.exception(f"Job {job_id} Failed: {e}")

            finally:
                job.finished_at = datetime.now(timezone.utc)
                db.commit()

    def _route_to_feature(self, job: JobModel) -> dict:
        """
        Routes the job to the correct Feature Handler.
        Uses lazy imports to prevent circular dependencies.
        """
        handler = self.handlers.get(job.job_type)
        if handler is not None:
            return handler.handle(job.scan_id, job.payload or {})

        if job.job_type == JobType.SCAN_INGESTION:
            from skinsage.features.ingestion.service.job_handler import ScanIngestionHandler
            return ScanIngestionHandler().handle(job.scan_id, job.payload or {})

        raise NotImplementedError(f"No handler registered for JobType: {job.job_type}")
