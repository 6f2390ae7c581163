# R2 스토리지 클라이언트 테스트 (boto3 클라이언트는 MagicMock 으로 대체)
import re
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, ReadTimeoutError

from blog_backend.core.exceptions import NotFoundError, StorageAuthError, StorageNetworkError, StorageTimeoutError
from blog_backend.core.storage import R2Storage, build_object_key


def make_storage(client=None):
    return R2Storage(
        account_id="acc123",
        access_key_id="AKIAEXAMPLE",
        secret_access_key="secret",
        bucket="blog-images",
        public_url="https://cdn.example.com/",
        client=client or MagicMock(),
    )


def client_error(code):
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, "PutObject")


def test_upload_puts_object_with_cache_control_and_returns_public_url():
    storage = make_storage()
    asset = storage.upload(b"img-bytes", "photo.jpg", "image/jpeg", "user-1")

    storage.client.put_object.assert_called_once()
    kwargs = storage.client.put_object.call_args.kwargs
    assert kwargs["Bucket"] == "blog-images"
    assert kwargs["Body"] == b"img-bytes"
    assert kwargs["ContentType"] == "image/jpeg"
    assert kwargs["CacheControl"] == "max-age=31536000"
    assert kwargs["Metadata"] == {"uploader-id": "user-1"}
    assert re.fullmatch(r"\d+-photo\.jpg", kwargs["Key"])

    assert asset.filename == kwargs["Key"]
    assert asset.size == len(b"img-bytes")
    assert asset.content_type == "image/jpeg"
    assert asset.url == f"https://cdn.example.com/{kwargs['Key']}"


@pytest.mark.parametrize(
    "original, expected",
    [("photo.png", "photo.png"), ("../../etc/photo.png", "photo.png"), ("C:\\Users\\me\\cat.gif", "cat.gif"), ("", "upload")],
)
def test_object_key_uses_timestamp_and_base_name(original, expected):
    key = build_object_key(original)
    timestamp, name = key.split("-", 1)
    assert timestamp.isdigit()
    assert name == expected


def test_object_keys_do_not_collide_for_same_filename():
    keys = {build_object_key("a.jpg") for _ in range(50)}
    # 나노초 단위라서 같은 파일명이라도 대부분 다른 키가 됩니다.
    assert len(keys) > 1


def test_delete_issues_single_delete():
    storage = make_storage()
    storage.delete("123-photo.jpg")
    storage.client.delete_object.assert_called_once_with(Bucket="blog-images", Key="123-photo.jpg")


@pytest.mark.parametrize("code", ["AccessDenied", "InvalidAccessKeyId", "SignatureDoesNotMatch"])
def test_auth_failures_are_reported_as_storage_auth_error(code):
    client = MagicMock()
    client.put_object.side_effect = client_error(code)
    with pytest.raises(StorageAuthError):
        make_storage(client).upload(b"x", "a.png", "image/png", "user-1")


def test_other_service_errors_are_network_errors():
    client = MagicMock()
    client.delete_object.side_effect = client_error("InternalError")
    with pytest.raises(StorageNetworkError):
        make_storage(client).delete("k")


def test_connection_failure_is_network_error():
    client = MagicMock()
    client.put_object.side_effect = EndpointConnectionError(endpoint_url="https://acc123.r2.cloudflarestorage.com")
    with pytest.raises(StorageNetworkError):
        make_storage(client).upload(b"x", "a.png", "image/png", "user-1")


def test_read_timeout_is_timeout_error():
    client = MagicMock()
    client.put_object.side_effect = ReadTimeoutError(endpoint_url="https://acc123.r2.cloudflarestorage.com")
    with pytest.raises(StorageTimeoutError):
        make_storage(client).upload(b"x", "a.png", "image/png", "user-1")
    assert client.put_object.call_count == 1


def test_owner_of_reads_uploader_metadata():
    client = MagicMock()
    client.head_object.return_value = {"Metadata": {"uploader-id": "user-1"}, "ContentLength": 3}
    assert make_storage(client).owner_of("123-photo.jpg") == "user-1"
    client.head_object.assert_called_once_with(Bucket="blog-images", Key="123-photo.jpg")


def test_owner_of_object_without_metadata_is_none():
    client = MagicMock()
    client.head_object.return_value = {"ContentLength": 3}
    assert make_storage(client).owner_of("old.jpg") is None


@pytest.mark.parametrize("code", ["404", "NoSuchKey"])
def test_owner_of_missing_object_is_not_found(code):
    client = MagicMock()
    client.head_object.side_effect = ClientError({"Error": {"Code": code, "Message": "Not Found"}}, "HeadObject")
    with pytest.raises(NotFoundError):
        make_storage(client).owner_of("nope.jpg")


def test_owner_of_access_denied_is_storage_auth_error():
    client = MagicMock()
    client.head_object.side_effect = client_error("AccessDenied")
    with pytest.raises(StorageAuthError):
        make_storage(client).owner_of("k")


def test_real_client_points_at_account_endpoint_without_retries():
    storage = R2Storage("acc123", "AKIAEXAMPLE", "secret", "blog-images", "https://cdn.example.com", timeout=30)
    assert storage.client.meta.endpoint_url == "https://acc123.r2.cloudflarestorage.com"
    assert storage.client.meta.region_name == "auto"
    assert storage.client.meta.config.read_timeout == 30
    assert storage.client.meta.config.connect_timeout == 30
