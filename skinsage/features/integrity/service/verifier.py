# File: skinsage/features/integrity/service/verifier.py
from typing import Optional
from ..data.hasher import SHA256Hasher
from ..domain.interfaces import IHasher
from ..domain.models import ChecksumVerdict

class ChecksumVerifier:
    """
    Compares a client-declared checksum against the fetched bytes.
    Accepts a digest over the raw bytes or over their base64 text.
    """

    def __init__(self, hasher: Optional[IHasher] = None):
        self.hasher = hasher or SHA256Hasher()

    def verify(self, data: bytes, declared: Optional[str]) -> ChecksumVerdict:
        raw_digest = self.hasher.digest(data)
        base64_digest = self.hasher.digest_base64_text(data)

        matched = None
        if declared == raw_digest:
            matched = "raw"
        elif declared == base64_digest:
            matched = "base64"

        return ChecksumVerdict(
            declared=declared,
            raw_digest=raw_digest,
            base64_digest=base64_digest,
            matched_encoding=matched
        )

    def is_mismatch(self, data: bytes, declared: Optional[str]) -> bool:
        return self.verify(data, declared).is_mismatch
