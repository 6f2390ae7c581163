# Post 도메인 모델
# - author_id 는 작성 시점의 인증된 사용자 id. 이후 변경 불가 (PostPatch 에 필드 없음)
# - PostDocument: posts 컬렉션, 목록 조회용 created_at 인덱스

from datetime import datetime
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import BaseModel, Field


class Post(BaseModel):
    id: Optional[str] = None
    title: str
    content: str
    author_id: str
    image_url: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PostPatch(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)
    image_url: Optional[str] = None


class PostUpdate(PostPatch):
    updated_at: datetime


class PostDocument(Document):
    title: str
    content: str
    author_id: Indexed(PydanticObjectId)
    image_url: str = ""
    created_at: Indexed(datetime)
    updated_at: datetime

    class Settings:
        name = "posts"

    @classmethod
    def from_model(cls, post: Post) -> "PostDocument":
        data = post.model_dump(exclude={"id", "author_id"})
        return cls(author_id=PydanticObjectId(post.author_id), **data)

    def to_model(self) -> Post:
        data = self.model_dump(exclude={"id", "revision_id", "author_id"})
        return Post(id=str(self.id), author_id=str(self.author_id), **data)
