# 테스트 공용 픽스처
# - MongoDB / R2 없이 서비스 로직을 검증하기 위한 in-memory 저장소와 가짜 스토리지

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
from bson import ObjectId

from blog_backend.core.exceptions import NotFoundError
from blog_backend.core.security import PasswordHasher, TokenManager
from blog_backend.models.asset import Asset
from blog_backend.models.post import Post, PostUpdate
from blog_backend.models.user import User, UserUpdate
from blog_backend.repositories.base import parse_object_id, to_set_document

TEST_SECRET = "test-secret-key-that-is-at-least-32-bytes-long"


class InMemoryUserRepository:
    def __init__(self):
        self.users: Dict[str, User] = {}

    async def create(self, user: User) -> User:
        stored = user.model_copy(update={"id": str(ObjectId())})
        self.users[stored.id] = stored
        return stored

    async def get_by_email(self, email: str) -> Optional[User]:
        found = next((u for u in self.users.values() if u.email == email), None)
        # 실제 DB 왕복처럼 조회 후 이벤트 루프에 양보 (동시 가입 경쟁 재현용)
        await asyncio.sleep(0)
        return found

    async def get_by_id(self, user_id: str) -> User:
        parse_object_id(user_id)
        if user_id not in self.users:
            raise NotFoundError("User", user_id)
        return self.users[user_id]

    async def update(self, user_id: str, update: UserUpdate) -> None:
        user = await self.get_by_id(user_id)
        self.users[user_id] = user.model_copy(update=to_set_document(update))

    async def delete(self, user_id: str) -> None:
        await self.get_by_id(user_id)
        del self.users[user_id]


class InMemoryPostRepository:
    def __init__(self):
        self.posts: Dict[str, Post] = {}

    async def create(self, post: Post) -> Post:
        stored = post.model_copy(update={"id": str(ObjectId())})
        self.posts[stored.id] = stored
        return stored

    async def get_by_id(self, post_id: str) -> Post:
        parse_object_id(post_id)
        if post_id not in self.posts:
            raise NotFoundError("Post", post_id)
        return self.posts[post_id]

    async def update(self, post_id: str, update: PostUpdate) -> None:
        post = await self.get_by_id(post_id)
        self.posts[post_id] = post.model_copy(update=to_set_document(update))

    async def delete(self, post_id: str) -> None:
        await self.get_by_id(post_id)
        del self.posts[post_id]

    def _newest_first(self) -> List[Post]:
        return sorted(self.posts.values(), key=lambda p: (p.created_at, p.id), reverse=True)

    async def list(self, page: int, limit: int) -> List[Post]:
        start = (page - 1) * limit
        return self._newest_first()[start:start + limit]

    async def get_by_author(self, author_id: str) -> List[Post]:
        parse_object_id(author_id)
        return [p for p in self._newest_first() if p.author_id == author_id]


class FakeStorage:
    def __init__(self, public_url: str = "https://cdn.example.com"):
        self.public_url = public_url
        self.uploads = []
        self.deleted = []
        self.owners: Dict[str, str] = {}

    def upload(self, data: bytes, original_filename: str, content_type: str, uploader_id: str) -> Asset:
        key = f"{len(self.uploads) + 1}-{original_filename}"
        self.uploads.append((key, data, content_type))
        self.owners[key] = uploader_id
        return Asset(filename=key, content_type=content_type, size=len(data), url=f"{self.public_url}/{key}")

    def owner_of(self, key: str) -> Optional[str]:
        if key not in self.owners:
            raise NotFoundError("Image", key)
        return self.owners[key]

    def delete(self, key: str) -> None:
        self.deleted.append(key)


class TickingClock:
    """호출될 때마다 1초씩 증가하는 시계 (created_at 정렬을 결정적으로 만들기 위함)"""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def hasher():
    # 테스트 속도를 위해 bcrypt 최소 cost 사용
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens():
    return TokenManager(TEST_SECRET)


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def post_repo():
    return InMemoryPostRepository()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def clock():
    return TickingClock()
