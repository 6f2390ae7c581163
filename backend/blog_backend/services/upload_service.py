# 이미지 업로드 서비스
# 검증 -> 리사이즈/재인코딩 -> R2 업로드 순서로 진행하고, 처음 실패한 단계에서 멈춥니다.
# DB 에는 아무것도 쓰지 않습니다. 반환된 URL 을 게시글에 저장할지는 호출자가 정합니다.
# boto3 / Pillow 모두 blocking 이므로 라우터는 동기 함수(threadpool)로 호출합니다.

from typing import Optional, Protocol
import logging

from ..core.exceptions import InvalidImageTypeError
from ..core.images import ImageProcessor, normalize_content_type
from ..models.asset import Asset

logger = logging.getLogger(__name__)


class ObjectStorage(Protocol):
    def upload(self, data: bytes, original_filename: str, content_type: str, uploader_id: str) -> Asset: ...

    def owner_of(self, key: str) -> Optional[str]: ...

    def delete(self, key: str) -> None: ...


class UploadService:
    def __init__(self, storage: ObjectStorage, processor: ImageProcessor = None):
        self.storage = storage
        self.processor = processor or ImageProcessor(1920, 1080, 85)

    def upload_image(self, data: bytes, filename: str, content_type: str, uploader_id: str) -> Asset:
        if not self.processor.validate(content_type):
            raise InvalidImageTypeError(content_type)
        content_type = normalize_content_type(content_type)

        processed = self.processor.process(data, content_type)
        asset = self.storage.upload(processed, filename, content_type, uploader_id)
        logger.info(f"[Upload] {filename} -> {asset.url} ({len(data)} -> {asset.size} bytes)")
        return asset

    def image_owner(self, key: str) -> Optional[str]:
        return self.storage.owner_of(key)

    def delete_image(self, key: str) -> None:
        self.storage.delete(key)
