# 설정 모듈
# - .env 값들을 한 곳에서 관리
# - 기본값을 제공하여 로컬 실행 편의성 확보
# - 전역 싱글턴 대신 get_settings()로 한 번만 만들고, 각 서비스 생성자에 명시적으로 전달

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# 프로젝트 루트 디렉토리 경로 찾기
# 이 파일은 backend/blog_backend/core/config.py 에 있으므로 4단계 상위가 프로젝트 루트입니다.
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / ".env"

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class Settings(BaseSettings):
    APP_NAME: str = "blog-backend"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "blog"
    # 단일 DB 호출 제한 시간 (초)
    DB_TIMEOUT_SECONDS: float = 10.0

    JWT_SECRET_KEY: str = Field(..., description="JWT 토큰 서명에 사용되는 비밀키. 반드시 강력한 랜덤 문자열로 설정하세요.")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24
    # None 이면 passlib(bcrypt) 기본 cost 를 사용합니다.
    BCRYPT_ROUNDS: Optional[int] = Field(None, ge=4, le=31)

    CORS_ALLOW_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # Cloudflare R2 (S3 호환) 설정
    R2_ACCOUNT_ID: str = ""
    R2_ACCESS_KEY_ID: str = ""
    R2_SECRET_ACCESS_KEY: str = ""
    R2_BUCKET: str = ""
    # 업로드된 파일의 공개 URL 접두사 (예: https://images.example.com)
    R2_PUBLIC_URL: str = ""
    R2_TIMEOUT_SECONDS: float = 30.0

    IMAGE_MAX_WIDTH: int = Field(1920, gt=0)
    IMAGE_MAX_HEIGHT: int = Field(1080, gt=0)
    IMAGE_JPEG_QUALITY: int = Field(85, ge=1, le=95)
    UPLOAD_MAX_BYTES: int = 10 * 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH) if ENV_FILE_PATH.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def _hmac_only(cls, value: str) -> str:
        # 대칭키(HMAC) 계열만 허용합니다. 비대칭 알고리즘은 비밀키 하나로 검증할 수 없습니다.
        if value not in HMAC_ALGORITHMS:
            raise ValueError(f"JWT_ALGORITHM must be one of {', '.join(HMAC_ALGORITHMS)}")
        return value

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]

    @property
    def r2_endpoint(self) -> str:
        return f"https://{self.R2_ACCOUNT_ID}.r2.cloudflarestorage.com"


@lru_cache
def get_settings() -> Settings:
    return Settings()
