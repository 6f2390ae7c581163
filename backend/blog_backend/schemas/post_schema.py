# 게시글 요청/응답 스키마

from datetime import datetime

from pydantic import BaseModel, Field

from ..models.post import Post


class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    image_url: str = ""


class PostPublic(BaseModel):
    id: str
    title: str
    content: str
    author_id: str
    image_url: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_post(cls, post: Post) -> "PostPublic":
        return cls(**post.model_dump())
