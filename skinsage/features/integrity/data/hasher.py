# File: skinsage/features/integrity/data/hasher.py
import base64
import hashlib
from ..domain.interfaces import IHasher

class SHA256Hasher(IHasher):
    def digest(self, data: bytes) -> str:
        return hashlib.sha256(data).hexdigest()

    def digest_base64_text(self, data: bytes) -> str:
        """
        Some clients hash the base64 string they upload from
        instead of the decoded bytes. Reproduce that digest.
        """
        return hashlib.sha256(base64.b64encode(data)).hexdigest()
