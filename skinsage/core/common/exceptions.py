# File: skinsage/core/common/exceptions.py

class ScanNotFoundError(LookupError):
    """Raised when a scan id does not resolve to a stored scan."""

    def __init__(self, scan_id):
        super().__init__(f"Scan {scan_id} not found.")
        self.scan_id = scan_id

class ObjectNotFoundError(LookupError):
    """Raised when object storage has no usable bytes for a key."""

    def __init__(self, key: str):
        super().__init__(f"Object not found: {key}")
        self.key = key

class UnsupportedAngleError(ValueError):
    pass

class ImageDecodeError(ValueError):
    pass
