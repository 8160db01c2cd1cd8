# File: skinsage/features/integrity/domain/interfaces.py
from abc import ABC, abstractmethod

class IHasher(ABC):
    @abstractmethod
    def digest(self, data: bytes) -> str:
        """Hex digest of the raw bytes."""
        pass

    @abstractmethod
    def digest_base64_text(self, data: bytes) -> str:
        """Hex digest of the base64 text encoding of the bytes."""
        pass
