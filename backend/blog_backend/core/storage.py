# Cloudflare R2 오브젝트 스토리지 클라이언트 (S3 호환 API, boto3)
# - 업로드: "<나노초 타임스탬프>-<원본 파일명>" 키로 PUT, 1년 캐시 헤더
# - 업로더 id 를 오브젝트 메타데이터(uploader-id)에 기록 -> 삭제 권한 확인에 사용
# - 삭제: 키로 DELETE
# - 모든 호출은 30초 타임아웃, 재시도 없음. 실패는 그대로 호출자에게 올라갑니다.

from pathlib import PurePosixPath, PureWindowsPath
from typing import Optional
import logging
import time

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)

from ..models.asset import Asset
from .exceptions import NotFoundError, StorageAuthError, StorageNetworkError, StorageTimeoutError

logger = logging.getLogger(__name__)

CACHE_CONTROL = "max-age=31536000"
AUTH_ERROR_CODES = {"AccessDenied", "InvalidAccessKeyId", "SignatureDoesNotMatch", "Unauthorized"}
NOT_FOUND_ERROR_CODES = {"404", "NoSuchKey", "NotFound"}
UPLOADER_METADATA_KEY = "uploader-id"


def build_object_key(original_filename: str) -> str:
    # 클라이언트가 보낸 경로 부분(../, C:\ 등)은 버리고 파일명만 사용합니다.
    name = PureWindowsPath(PurePosixPath(original_filename or "").name).name or "upload"
    return f"{time.time_ns()}-{name}"


class R2Storage:
    """Cloudflare R2 버킷에 파일을 올리고 지웁니다."""

    def __init__(
        self,
        account_id: str,
        access_key_id: str,
        secret_access_key: str,
        bucket: str,
        public_url: str,
        timeout: float = 30.0,
        client=None,
    ):
        self.bucket = bucket
        self.public_url = public_url.rstrip("/")
        self.endpoint = f"https://{account_id}.r2.cloudflarestorage.com"
        if client is None:
            client = boto3.client(
                "s3",
                endpoint_url=self.endpoint,
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                region_name="auto",
                config=Config(
                    signature_version="s3v4",
                    connect_timeout=timeout,
                    read_timeout=timeout,
                    retries={"total_max_attempts": 1},
                ),
            )
        self.client = client

        logger.info(f"[R2] storage configured: bucket={bucket} endpoint={self.endpoint}")
        logger.info(f"[R2] access key id: {access_key_id[:5]}..." if access_key_id else "[R2] access key id: not set")

    def upload(self, data: bytes, original_filename: str, content_type: str, uploader_id: str) -> Asset:
        key = build_object_key(original_filename)
        logger.info(f"[R2] uploading '{original_filename}' as '{key}' ({len(data)} bytes, {content_type})")
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                CacheControl=CACHE_CONTROL,
                Metadata={UPLOADER_METADATA_KEY: uploader_id},
            )
        except (BotoCoreError, ClientError) as e:
            raise self._translate(e, "upload", key) from e

        return Asset(
            filename=key,
            content_type=content_type,
            size=len(data),
            url=f"{self.public_url}/{key}",
        )

    def owner_of(self, key: str) -> Optional[str]:
        """오브젝트를 올린 사용자 id. 메타데이터가 없는 오래된 오브젝트는 None"""
        try:
            head = self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code", "") in NOT_FOUND_ERROR_CODES:
                raise NotFoundError("Image", key) from e
            raise self._translate(e, "head", key) from e
        except BotoCoreError as e:
            raise self._translate(e, "head", key) from e
        return head.get("Metadata", {}).get(UPLOADER_METADATA_KEY)

    def delete(self, key: str) -> None:
        logger.info(f"[R2] deleting '{key}' from bucket '{self.bucket}'")
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise self._translate(e, "delete", key) from e

    def _translate(self, exc: Exception, operation: str, key: str) -> Exception:
        if isinstance(exc, (ConnectTimeoutError, ReadTimeoutError)):
            logger.error(f"[R2] {operation} of '{key}' timed out: {exc}")
            return StorageTimeoutError()
        if isinstance(exc, ClientError):
            code = exc.response.get("Error", {}).get("Code", "")
            logger.error(f"[R2] {operation} of '{key}' rejected ({code}): {exc}")
            if code in AUTH_ERROR_CODES:
                return StorageAuthError()
            return StorageNetworkError()
        logger.error(f"[R2] {operation} of '{key}' failed: {exc}")
        return StorageNetworkError()
