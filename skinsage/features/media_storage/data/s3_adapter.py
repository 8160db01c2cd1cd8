# File: skinsage/features/media_storage/data/s3_adapter.py
import logging
from typing import Any, Optional

import boto3
from botocore.client import Config
from botocore.exceptions import ClientError

from skinsage.core.config.settings import settings
from skinsage.core.common.exceptions import ObjectNotFoundError
from ..domain.interfaces import IObjectStorage
from ..domain.models import WriteTarget

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")


def build_s3_client():
    """
    Creates a boto3 S3 client from settings.
    Path-style addressing is forced when a custom endpoint (MinIO, R2) is set.
    """
    kwargs = {"region_name": settings.S3_REGION}
    if settings.S3_ENDPOINT:
        kwargs["endpoint_url"] = settings.S3_ENDPOINT
    if settings.S3_ACCESS_KEY_ID and settings.S3_SECRET_ACCESS_KEY:
        kwargs["aws_access_key_id"] = settings.S3_ACCESS_KEY_ID
        kwargs["aws_secret_access_key"] = settings.S3_SECRET_ACCESS_KEY

    config = Config(
        signature_version="s3v4",
        s3={"addressing_style": "path" if settings.S3_ENDPOINT else "auto"},
    )
    return boto3.client("s3", config=config, **kwargs)


def normalize_body(body: Any) -> Optional[bytes]:
    """
    Collapses the shapes an SDK may hand back into bytes.
    bytes / bytearray / memoryview are copied, anything with .read()
    (StreamingBody, file objects) is drained. Everything else is None.
    """
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, (bytearray, memoryview)):
        return bytes(body)
    read = getattr(body, "read", None)
    if callable(read):
        try:
            data = read()
        finally:
            close = getattr(body, "close", None)
            if callable(close):
                close()
        return bytes(data) if isinstance(data, (bytes, bytearray, memoryview)) else None
    return None


class S3ObjectStorage(IObjectStorage):
    def __init__(self, client=None, bucket: Optional[str] = None, public_base_url: Optional[str] = None):
        self.client = client or build_s3_client()
        self.bucket = bucket or settings.S3_BUCKET
        self.public_base_url = settings.S3_PUBLIC_BASE_URL if public_base_url is None else public_base_url

    def issue_write_target(self, key: str, content_type: str, ttl_seconds: int) -> WriteTarget:
        url = self.client.generate_presigned_url(
            ClientMethod="put_object",
            Params={
                "Bucket": self.bucket,
                "Key": key,
                "ContentType": content_type,
            },
            ExpiresIn=ttl_seconds,
        )
        return WriteTarget(url=url, expires_in=ttl_seconds, headers={"Content-Type": content_type})

    def fetch_object(self, key: str) -> bytes:
        try:
            resp = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            code = (e.response.get("Error") or {}).get("Code")
            if code in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(key) from e
            raise

        data = normalize_body(resp.get("Body"))
        if data is None:
            logger.warning(f"Unrecognised body for s3://{self.bucket}/{key}, treating as absent")
            raise ObjectNotFoundError(key)
        return data

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        return f"s3://{self.bucket}/{key}"
