# 이미지 업로드 라우터
# - POST /api/v1/upload        : multipart 필드 "image", 로그인 필요
# - DELETE /api/v1/upload/{key} : 업로드한 본인만 삭제 가능 (다른 사용자는 403)
#
# Pillow/boto3 가 blocking 이라 async 가 아닌 일반 def 로 선언 -> FastAPI 가 threadpool 에서 실행

from fastapi import APIRouter, Depends, File, UploadFile

from ...core.config import Settings, get_settings
from ...core.exceptions import InvalidImageTypeError, PermissionDeniedError, ValidationError
from ...core.security import TokenClaims
from ...schemas.user_schema import ApiResponse
from ...services.upload_service import UploadService
from ..deps import get_active_claims, get_upload_service

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("", response_model=ApiResponse, response_model_exclude_none=True, summary="이미지 업로드 (JPEG/PNG/GIF)")
def upload_image(
    image: UploadFile = File(...),
    claims: TokenClaims = Depends(get_active_claims),
    service: UploadService = Depends(get_upload_service),
    settings: Settings = Depends(get_settings),
):
    # 타입 검사를 먼저 해서 이미지가 아닌 큰 파일은 읽지 않습니다.
    if not service.processor.validate(image.content_type):
        raise InvalidImageTypeError(image.content_type)
    data = image.file.read(settings.UPLOAD_MAX_BYTES + 1)
    if len(data) > settings.UPLOAD_MAX_BYTES:
        raise ValidationError(f"File too large (max {settings.UPLOAD_MAX_BYTES} bytes)")

    asset = service.upload_image(data, image.filename or "upload", image.content_type, claims.subject)
    return ApiResponse(data=asset)


@router.delete("/{key}", response_model=ApiResponse, response_model_exclude_none=True, summary="업로드 파일 삭제 (업로더만)")
def delete_image(
    key: str,
    claims: TokenClaims = Depends(get_active_claims),
    service: UploadService = Depends(get_upload_service),
):
    if service.image_owner(key) != claims.subject:
        raise PermissionDeniedError()
    service.delete_image(key)
    return ApiResponse(message="Image deleted successfully")
