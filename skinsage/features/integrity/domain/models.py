# File: skinsage/features/integrity/domain/models.py
from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class ChecksumVerdict:
    """
    Outcome of comparing a client checksum against the stored bytes.
    `matched_encoding` is 'raw', 'base64' or None.
    """
    declared: Optional[str]
    raw_digest: str
    base64_digest: str
    matched_encoding: Optional[str] = None

    @property
    def is_mismatch(self) -> bool:
        # No declared checksum is never a mismatch.
        return bool(self.declared) and self.matched_encoding is None
