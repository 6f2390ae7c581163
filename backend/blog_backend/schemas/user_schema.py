# 요청/응답 스키마 정의 (Pydantic 모델)

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field

from ..models.user import User


class ApiResponse(BaseModel):
    """모든 엔드포인트가 사용하는 공통 응답 봉투"""
    status: str = "success"
    message: Optional[str] = None
    data: Optional[Any] = None


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"


class UserPublic(BaseModel):
    # password_hash 는 절대 응답에 포함하지 않습니다.
    id: str
    username: str
    email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(**user.model_dump(exclude={"password_hash"}))
