# File: skinsage/features/media_storage/domain/models.py
from dataclasses import dataclass, field
from typing import Dict

@dataclass(frozen=True)
class WriteTarget:
    """
    A time-boxed authorization for the client to PUT bytes
    directly into object storage under one key.
    """
    url: str
    expires_in: int
    method: str = "PUT"
    headers: Dict[str, str] = field(default_factory=dict)
