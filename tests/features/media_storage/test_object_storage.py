import io
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from skinsage.core.common.exceptions import ObjectNotFoundError
from skinsage.features.media_storage.data.s3_adapter import S3ObjectStorage, normalize_body
from skinsage.features.media_storage.data.local_store import LocalObjectStorage

KEY = "scans/patient-1/scan-1/front.png"

@pytest.fixture
def s3_client():
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://bucket.example/put?sig=abc"
    return client

# --- Body normalisation ---

@pytest.mark.parametrize("body", [
    b"abc",
    bytearray(b"abc"),
    memoryview(b"abc"),
    io.BytesIO(b"abc"),
])
def test_normalize_body_accepts_byte_shapes(body):
    assert normalize_body(body) == b"abc"

@pytest.mark.parametrize("body", [None, "abc", 123, {"data": b"abc"}])
def test_normalize_body_rejects_other_shapes(body):
    assert normalize_body(body) is None

# --- S3 adapter ---

def test_write_target_is_presigned_put(s3_client):
    storage = S3ObjectStorage(client=s3_client, bucket="skinsage", public_base_url="")

    target = storage.issue_write_target(KEY, "image/png", 900)

    s3_client.generate_presigned_url.assert_called_once_with(
        ClientMethod="put_object",
        Params={"Bucket": "skinsage", "Key": KEY, "ContentType": "image/png"},
        ExpiresIn=900,
    )
    assert target.url == "https://bucket.example/put?sig=abc"
    assert target.method == "PUT"
    assert target.expires_in == 900
    assert target.headers == {"Content-Type": "image/png"}

def test_fetch_object_drains_streaming_body(s3_client):
    s3_client.get_object.return_value = {"Body": io.BytesIO(b"pixels")}
    storage = S3ObjectStorage(client=s3_client, bucket="skinsage")

    assert storage.fetch_object(KEY) == b"pixels"
    s3_client.get_object.assert_called_once_with(Bucket="skinsage", Key=KEY)

def test_fetch_object_unrecognised_body_is_not_found(s3_client):
    s3_client.get_object.return_value = {"Body": "not bytes"}
    storage = S3ObjectStorage(client=s3_client, bucket="skinsage")

    with pytest.raises(ObjectNotFoundError):
        storage.fetch_object(KEY)

def test_fetch_object_missing_key_is_not_found(s3_client):
    s3_client.get_object.side_effect = ClientError({"Error": {"Code": "NoSuchKey"}}, "GetObject")
    storage = S3ObjectStorage(client=s3_client, bucket="skinsage")

    with pytest.raises(ObjectNotFoundError):
        storage.fetch_object(KEY)

def test_fetch_object_other_client_errors_propagate(s3_client):
    s3_client.get_object.side_effect = ClientError({"Error": {"Code": "AccessDenied"}}, "GetObject")
    storage = S3ObjectStorage(client=s3_client, bucket="skinsage")

    with pytest.raises(ClientError):
        storage.fetch_object(KEY)

def test_public_url_prefers_public_base(s3_client):
    with_cdn = S3ObjectStorage(client=s3_client, bucket="skinsage", public_base_url="https://cdn.example.com//")
    bare = S3ObjectStorage(client=s3_client, bucket="skinsage", public_base_url="")

    assert with_cdn.public_url(KEY) == f"https://cdn.example.com/{KEY}"
    assert bare.public_url(KEY) == f"s3://skinsage/{KEY}"

# --- Local adapter ---

def test_local_store_round_trip(tmp_path):
    storage = LocalObjectStorage(tmp_path)

    target = storage.issue_write_target(KEY, "image/png", 900)
    assert target.url.startswith("file://")

    storage.put_object(KEY, b"pixels")
    assert storage.fetch_object(KEY) == b"pixels"
    assert (tmp_path / KEY).exists()

def test_local_store_missing_object(tmp_path):
    with pytest.raises(ObjectNotFoundError):
        LocalObjectStorage(tmp_path).fetch_object(KEY)

def test_local_store_refuses_keys_outside_root(tmp_path):
    with pytest.raises(ValueError):
        LocalObjectStorage(tmp_path / "root").fetch_object("../escape.png")

# --- Adapter selection ---

def test_build_object_storage_follows_backend_setting(monkeypatch):
    from skinsage.core.config.settings import settings
    from skinsage.features.media_storage.service.api import build_object_storage

    monkeypatch.setattr(settings, "STORAGE_BACKEND", "local")
    assert isinstance(build_object_storage(), LocalObjectStorage)

    monkeypatch.setattr(settings, "STORAGE_BACKEND", "ftp")
    with pytest.raises(ValueError):
        build_object_storage()
