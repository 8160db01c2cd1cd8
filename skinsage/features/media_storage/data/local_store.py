# File: skinsage/features/media_storage/data/local_store.py
import logging
from pathlib import Path
from typing import Optional

from skinsage.core.config.settings import settings
from skinsage.core.common.exceptions import ObjectNotFoundError
from ..domain.interfaces import IObjectStorage
from ..domain.models import WriteTarget

logger = logging.getLogger(__name__)


class LocalObjectStorage(IObjectStorage):
    """
    Filesystem-backed object store for development and tests.
    Keys map to paths under the root: scans/p1/s1/front.jpg -> <root>/scans/p1/s1/front.jpg
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root else settings.ARTIFACTS_DIR

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        # Keys come from our own key builder, but never escape the root.
        if self.root.resolve() not in path.parents:
            raise ValueError(f"Key escapes storage root: {key}")
        return path

    def issue_write_target(self, key: str, content_type: str, ttl_seconds: int) -> WriteTarget:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        return WriteTarget(url=path.as_uri(), expires_in=ttl_seconds, headers={"Content-Type": content_type})

    def put_object(self, key: str, data: bytes) -> Path:
        """Plays the client's direct upload against the issued target."""
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def fetch_object(self, key: str) -> bytes:
        path = self._path_for(key)
        if not path.is_file():
            raise ObjectNotFoundError(key)
        return path.read_bytes()

    def public_url(self, key: str) -> str:
        return self._path_for(key).as_uri()
