# User 도메인 모델
# - User: 서비스 계층이 다루는 순수 모델 (DB 없이도 생성 가능 -> 테스트에서 in-memory 저장소 사용)
# - UserPatch / UserUpdate: 부분 수정용 모델. 값이 있는 필드만 $set 됩니다.
# - UserDocument: MongoDB(Beanie) 저장용 Document, users 컬렉션

from datetime import datetime
from typing import Optional

from beanie import Document, Indexed
from pydantic import BaseModel, EmailStr, Field


class User(BaseModel):
    id: Optional[str] = None
    username: str
    email: str
    password_hash: str = Field(repr=False)
    created_at: datetime
    updated_at: datetime


class UserPatch(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, repr=False)


class UserUpdate(BaseModel):
    """저장소로 넘기는 수정 내용. password 대신 이미 해시된 값만 들고 있습니다."""
    username: Optional[str] = None
    email: Optional[str] = None
    password_hash: Optional[str] = Field(None, repr=False)
    updated_at: datetime


class UserDocument(Document):
    username: str
    # 이메일 중복은 서비스의 사전 조회로 막습니다. 인덱스는 조회용입니다.
    email: Indexed(str)
    password_hash: str = Field(repr=False)
    created_at: datetime
    updated_at: datetime

    class Settings:
        name = "users"  # 컬렉션명

    @classmethod
    def from_model(cls, user: User) -> "UserDocument":
        return cls(**user.model_dump(exclude={"id"}))

    def to_model(self) -> User:
        return User(id=str(self.id), **self.model_dump(exclude={"id", "revision_id"}))
