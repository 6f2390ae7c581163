# FastAPI 의존성 모음
# - 설정값으로 서비스 객체를 조립 (생성자 주입)
# - 인증 게이트: Authorization: Bearer <token> 검증 후 TokenClaims 반환
# - 쓰기 게이트: 토큰의 사용자가 아직 존재하는지까지 확인 (탈퇴 후 남은 토큰 차단)
# 테스트에서는 app.dependency_overrides 로 서비스/토큰 매니저를 바꿔 끼웁니다.

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from ..core.config import Settings, get_settings
from ..core.exceptions import AuthError, InvalidObjectIdError, NotFoundError
from ..core.images import ImageProcessor
from ..core.security import PasswordHasher, TokenClaims, TokenManager
from ..core.storage import R2Storage
from ..repositories.post_repository import BeaniePostRepository
from ..repositories.user_repository import BeanieUserRepository
from ..services.content_service import ContentService
from ..services.session_service import SessionService
from ..services.upload_service import UploadService

# auto_error=False: 헤더가 없을 때도 공통 응답 봉투로 401 을 돌려주기 위해 직접 처리
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def get_token_manager(settings: Settings = Depends(get_settings)) -> TokenManager:
    return TokenManager(
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        ttl=timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS),
    )


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)


def get_session_service(
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenManager = Depends(get_token_manager),
) -> SessionService:
    return SessionService(BeanieUserRepository(), hasher, tokens)


def get_content_service() -> ContentService:
    return ContentService(BeaniePostRepository())


@lru_cache
def _default_upload_service() -> UploadService:
    # boto3 클라이언트는 만들 때 비용이 있으므로 프로세스당 한 번만 생성
    settings = get_settings()
    storage = R2Storage(
        account_id=settings.R2_ACCOUNT_ID,
        access_key_id=settings.R2_ACCESS_KEY_ID,
        secret_access_key=settings.R2_SECRET_ACCESS_KEY,
        bucket=settings.R2_BUCKET,
        public_url=settings.R2_PUBLIC_URL,
        timeout=settings.R2_TIMEOUT_SECONDS,
    )
    processor = ImageProcessor(settings.IMAGE_MAX_WIDTH, settings.IMAGE_MAX_HEIGHT, settings.IMAGE_JPEG_QUALITY)
    return UploadService(storage, processor)


def get_upload_service() -> UploadService:
    return _default_upload_service()


def get_current_claims(
    token: Optional[str] = Depends(oauth2_scheme),
    tokens: TokenManager = Depends(get_token_manager),
) -> TokenClaims:
    if not token:
        raise AuthError("Authorization header is required")
    return tokens.validate_token(token)


async def get_active_claims(
    claims: TokenClaims = Depends(get_current_claims),
    sessions: SessionService = Depends(get_session_service),
) -> TokenClaims:
    # 서명이 유효해도 sub 가 ObjectId 가 아니거나 이미 탈퇴한 사용자면 401
    try:
        await sessions.get_user(claims.subject)
    except (InvalidObjectIdError, NotFoundError) as e:
        raise AuthError("User for this token no longer exists") from e
    return claims
