import uuid
import pytest

from skinsage.core.common.enums import REQUIRED_ANGLES
from skinsage.core.common.exceptions import ScanNotFoundError
from skinsage.core.database.connection import SessionLocal
from skinsage.core.jobs.manager import JobManager
from skinsage.core.jobs.models import JobModel
from skinsage.core.jobs.types import JobType, JobStatus
from skinsage.features.ingestion.service.job_handler import ScanIngestionHandler
from skinsage.features.ingestion.service.upload_targets import UploadTargetIssuer
from skinsage.features.scans.data.repository import SqlScanRepo
from skinsage.features.scans.service.api import ScanRecordService


class ExplodingHandler:
    def handle(self, scan_id, params):
        raise RuntimeError("worker crashed")


def test_job_submission_links_scan():
    """
    Verifies that a job is stored PENDING and recorded on the scan.
    """
    scan = ScanRecordService().create_scan("patient-1")

    job_id = JobManager().submit_job(scan.id, JobType.SCAN_INGESTION, {"max_workers": 1})

    with SessionLocal() as db:
        job = db.get(JobModel, job_id)
        assert job.scan_id == scan.id
        assert job.status == JobStatus.PENDING
        assert job.payload == {"max_workers": 1}

    assert ScanRecordService().get_scan(scan.id).ingest_job_id == job_id

def test_submit_for_unknown_scan_fails():
    with pytest.raises(ScanNotFoundError):
        JobManager().submit_job(uuid.uuid4(), JobType.SCAN_INGESTION)

def test_run_ingestion_job_end_to_end(local_storage, sharp_png):
    scan = ScanRecordService().create_scan("patient-1")
    issued = UploadTargetIssuer(local_storage).issue(
        scan.id, [{"angle": a.value, "content_type": "image/png"} for a in REQUIRED_ANGLES]
    )
    for item in issued:
        local_storage.put_object(item.storage_key, sharp_png)

    manager = JobManager(handlers={JobType.SCAN_INGESTION: ScanIngestionHandler(local_storage)})
    job_id = manager.submit_job(scan.id, JobType.SCAN_INGESTION)
    manager.run_job(job_id)

    with SessionLocal() as db:
        job = db.get(JobModel, job_id)
        assert job.status == JobStatus.COMPLETED
        assert job.result_meta == {"status": "complete", "quality_flags": [], "missing_angles": []}
        assert job.finished_at is not None

def test_run_job_records_failure():
    scan = ScanRecordService().create_scan("patient-1")
    manager = JobManager(handlers={JobType.SCAN_INGESTION: ExplodingHandler()})

    job_id = manager.submit_job(scan.id, JobType.SCAN_INGESTION)
    manager.run_job(job_id)

    with SessionLocal() as db:
        job = db.get(JobModel, job_id)
        assert job.status == JobStatus.FAILED
        assert "worker crashed" in job.error_message

def test_run_missing_job_is_a_noop():
    JobManager().run_job(uuid.uuid4())

class RecordingScanRepo(SqlScanRepo):
    def __init__(self):
        super().__init__()
        self.linked = []

    def set_ingest_job(self, scan_id, job_id):
        self.linked.append((scan_id, job_id))
        super().set_ingest_job(scan_id, job_id)


def test_submission_links_job_through_scan_repository():
    scan = ScanRecordService().create_scan("patient-1")
    repo = RecordingScanRepo()

    job_id = JobManager(scan_repo=repo).submit_job(scan.id, JobType.SCAN_INGESTION)

    assert repo.linked == [(scan.id, job_id)]
    assert ScanRecordService().get_scan(scan.id).ingest_job_id == job_id
