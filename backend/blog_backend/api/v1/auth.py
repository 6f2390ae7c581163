# 인증 라우터
# - 회원가입: POST /api/v1/auth/register
# - 로그인: POST /api/v1/auth/login

from fastapi import APIRouter, Depends, status

from ...schemas.user_schema import ApiResponse, LoginRequest, TokenResponse, UserCreate, UserPublic
from ...services.session_service import SessionService
from ..deps import get_session_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    response_model_exclude_none=True,
    summary="회원가입 (이메일 중복 체크 포함)",
)
async def register(payload: UserCreate, service: SessionService = Depends(get_session_service)):
    user = await service.register(payload.username, payload.email, payload.password)
    return ApiResponse(message="User registered successfully", data=UserPublic.from_user(user))


@router.post("/login", response_model=ApiResponse, response_model_exclude_none=True, summary="로그인 (JWT 발급, 24시간 유효)")
async def login(payload: LoginRequest, service: SessionService = Depends(get_session_service)):
    token = await service.login(payload.email, payload.password)
    return ApiResponse(data=TokenResponse(token=token))
