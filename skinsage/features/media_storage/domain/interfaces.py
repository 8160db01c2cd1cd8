# File: skinsage/features/media_storage/domain/interfaces.py
from abc import ABC, abstractmethod
from .models import WriteTarget

class IObjectStorage(ABC):
    """
    Contract for the object store holding scan photographs.
    Adapters own the normalisation of whatever their SDK returns
    into a single bytes result.
    """

    @abstractmethod
    def issue_write_target(self, key: str, content_type: str, ttl_seconds: int) -> WriteTarget:
        """Returns a pre-authorized upload target for `key`."""
        pass

    @abstractmethod
    def fetch_object(self, key: str) -> bytes:
        """
        Returns the full object body.
        Raises ObjectNotFoundError when the key is absent or the body is unusable.
        """
        pass

    @abstractmethod
    def public_url(self, key: str) -> str:
        """The display URL stored alongside the image."""
        pass
