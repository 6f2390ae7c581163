# 이미지 처리 유틸리티 (Pillow)
# - Content-Type 검사 (디코딩 전에 싼 검사로 먼저 거름)
# - 디코딩한 실제 포맷이 선언된 Content-Type 과 같은지 확인
# - 최대 크기(기본 1920x1080)를 넘으면 비율을 유지하며 축소
# - 원래 포맷으로 다시 인코딩 (JPEG 는 품질 지정, PNG 는 무손실)
# - GIF 는 애니메이션 프레임을 보존하기 위해 그대로 통과시킵니다.

from io import BytesIO
import logging

from PIL import Image, UnidentifiedImageError

from .exceptions import ContentTypeMismatchError, ImageDecodeError, UnsupportedImageFormatError

logger = logging.getLogger(__name__)

# 카메라 사진은 Pillow 가 MPO(다중 JPEG) 로 읽는 경우가 있어 JPEG 로 취급
FORMAT_CONTENT_TYPES = {"JPEG": "image/jpeg", "MPO": "image/jpeg", "PNG": "image/png", "GIF": "image/gif"}
ALLOWED_CONTENT_TYPES = frozenset(FORMAT_CONTENT_TYPES.values())


def normalize_content_type(content_type: str) -> str:
    # "image/jpeg; charset=..." 같은 파라미터는 무시
    return (content_type or "").split(";")[0].strip().lower()


class ImageProcessor:
    def __init__(self, max_width: int = 1920, max_height: int = 1080, quality: int = 85):
        self.max_width = max_width
        self.max_height = max_height
        self.quality = quality

    def validate(self, content_type: str) -> bool:
        return normalize_content_type(content_type) in ALLOWED_CONTENT_TYPES

    def process(self, data: bytes, content_type: str) -> bytes:
        try:
            img = Image.open(BytesIO(data))
            img.load()
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
            raise ImageDecodeError() from e

        image_format = img.format
        if image_format not in FORMAT_CONTENT_TYPES:
            raise UnsupportedImageFormatError(image_format)
        declared = normalize_content_type(content_type)
        if FORMAT_CONTENT_TYPES[image_format] != declared:
            raise ContentTypeMismatchError(declared, image_format)

        if image_format == "GIF":
            logger.debug("[Image] GIF passed through without re-encoding")
            return data

        width, height = img.size
        if width > self.max_width or height > self.max_height:
            # thumbnail 은 비율을 유지하며 (max_width, max_height) 안에 들어가도록 줄입니다.
            img.thumbnail((self.max_width, self.max_height), Image.Resampling.LANCZOS)
            logger.info(f"[Image] resized {width}x{height} -> {img.size[0]}x{img.size[1]}")

        buf = BytesIO()
        if declared == "image/jpeg":
            if img.mode not in ("RGB", "L", "CMYK"):
                img = img.convert("RGB")
            img.save(buf, format="JPEG", quality=self.quality, optimize=True)
        else:
            img.save(buf, format="PNG", optimize=True)
        return buf.getvalue()
