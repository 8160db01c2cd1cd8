from enum import Enum

class JobType(str, Enum):
    SCAN_INGESTION = "scan_ingestion"

class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
