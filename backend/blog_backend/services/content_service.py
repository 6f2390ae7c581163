# 게시글 서비스 레이어
# - 생성/수정 시 타임스탬프 기록, 나머지는 저장소에 위임
# - 작성자 확인(권한)은 여기서 하지 않습니다. API 라우터가 담당합니다.

from datetime import datetime
from typing import Callable, List

from ..core.exceptions import ValidationError
from ..models.post import Post, PostPatch, PostUpdate
from ..repositories.base import PostRepository
from .session_service import utcnow


class ContentService:
    def __init__(self, repo: PostRepository, clock: Callable[[], datetime] = utcnow):
        self.repo = repo
        self.clock = clock

    async def create_post(self, post: Post) -> Post:
        now = self.clock()
        post = post.model_copy(update={"created_at": now, "updated_at": now})
        return await self.repo.create(post)

    async def get_post(self, post_id: str) -> Post:
        return await self.repo.get_by_id(post_id)

    async def update_post(self, post_id: str, patch: PostPatch) -> None:
        update = PostUpdate(**patch.model_dump(), updated_at=self.clock())
        await self.repo.update(post_id, update)

    async def delete_post(self, post_id: str) -> None:
        await self.repo.delete(post_id)

    async def list_posts(self, page: int, limit: int) -> List[Post]:
        """created_at 내림차순 목록. page 는 1부터 시작, 범위를 넘으면 빈 리스트."""
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive integers")
        return await self.repo.list(page, limit)

    async def list_posts_by_author(self, author_id: str) -> List[Post]:
        return await self.repo.get_by_author(author_id)
