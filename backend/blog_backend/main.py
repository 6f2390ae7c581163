# FastAPI 진입점
# - Beanie ODM 초기화 (MongoDB, lifespan)
# - 라우터 등록 (/api/v1)
# - CORS 설정
# - 도메인 예외 -> 공통 응답 봉투 {status, message} 변환

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from beanie import init_beanie
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo import AsyncMongoClient

from .api.v1.auth import router as auth_router
from .api.v1.posts import router as posts_router
from .api.v1.uploads import router as uploads_router
from .api.v1.users import router as users_router
from .core.config import Settings, get_settings
from .core.exceptions import BlogServiceError, UpstreamError
from .models.post import PostDocument
from .models.user import UserDocument

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # boto/pymongo 의 DEBUG 로그는 너무 많아서 한 단계 올립니다.
    for noisy in ("botocore", "boto3", "urllib3", "pymongo"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


async def init_database(settings: Settings) -> AsyncMongoClient:
    client = AsyncMongoClient(
        settings.MONGODB_URI,
        serverSelectionTimeoutMS=5000,
        timeoutMS=int(settings.DB_TIMEOUT_SECONDS * 1000),
    )
    # 연결 테스트: 여기서 실패하면 서버를 띄우지 않습니다. (모든 API 가 DB 를 사용)
    await client.admin.command("ping")
    await init_beanie(database=client[settings.MONGODB_DB_NAME], document_models=[UserDocument, PostDocument])
    logger.info(f"[MongoDB] connected, database={settings.MONGODB_DB_NAME}")
    return client


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


async def handle_service_error(request: Request, exc: BlogServiceError) -> JSONResponse:
    if isinstance(exc, UpstreamError):
        # 원인 예외는 이미 저장소/스토리지 계층에서 로그로 남겼습니다.
        logger.error(f"[API] {request.method} {request.url.path} -> upstream failure ({exc.upstream})")
    elif exc.status_code >= 500:
        logger.exception(f"[API] {request.method} {request.url.path} failed", exc_info=exc)
    return _error_response(exc.status_code, exc.message)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"[API] {request.method} {request.url.path} unexpected error", exc_info=exc)
    return _error_response(500, "Internal server error")


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{location}: {first.get('msg')}" if location else str(first.get("msg", "Invalid request"))
    return _error_response(400, message)


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = await init_database(settings)
        try:
            yield
        finally:
            await client.close()
            logger.info("[MongoDB] connection closed")

    app = FastAPI(
        title="Blog Backend API",
        description="사용자/게시글 CRUD, JWT 인증, R2 이미지 업로드",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS 허용 도메인 세팅
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Authorization", "Content-Type"],
    )

    app.add_exception_handler(BlogServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "app": settings.APP_NAME, "time": datetime.now(tz=timezone.utc).isoformat()}

    # API v1 라우터 등록
    for router in (auth_router, users_router, posts_router, uploads_router):
        app.include_router(router, prefix="/api/v1")

    return app
