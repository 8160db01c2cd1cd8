# File: skinsage/features/media_storage/service/api.py
from skinsage.core.config.settings import settings
from ..domain.interfaces import IObjectStorage
from ..data.local_store import LocalObjectStorage
from ..data.s3_adapter import S3ObjectStorage

def build_object_storage() -> IObjectStorage:
    """
    Picks the storage adapter named by STORAGE_BACKEND.
    The host application owns the returned instance's lifetime.
    """
    backend = settings.STORAGE_BACKEND
    if backend == "local":
        settings.ARTIFACTS_DIR.mkdir(parents=True, exist_ok=True)
        return LocalObjectStorage(settings.ARTIFACTS_DIR)
    if backend == "s3":
        return S3ObjectStorage()
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")
