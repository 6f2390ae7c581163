# 게시글 저장소 레이어 (MongoDB / Beanie)
# - 목록은 created_at 내림차순, skip/limit 페이지네이션 (전체 개수는 반환하지 않음)
# - MongoDB datetime 은 밀리초 단위라서 같은 시각의 글은 _id 로 순서를 고정합니다.

from typing import List

from beanie import SortDirection
from beanie.operators import Set

from ..core.exceptions import NotFoundError
from ..models.post import Post, PostDocument, PostUpdate
from .base import parse_object_id, to_set_document, translate_db_errors

NEWEST_FIRST = [("created_at", SortDirection.DESCENDING), ("_id", SortDirection.DESCENDING)]


class BeaniePostRepository:
    async def create(self, post: Post) -> Post:
        parse_object_id(post.author_id)
        return await self._insert(post)

    @translate_db_errors
    async def _insert(self, post: Post) -> Post:
        doc = await PostDocument.from_model(post).insert()
        return doc.to_model()

    async def get_by_id(self, post_id: str) -> Post:
        oid = parse_object_id(post_id)
        doc = await self._get(oid)
        if doc is None:
            raise NotFoundError("Post", post_id)
        return doc.to_model()

    async def update(self, post_id: str, update: PostUpdate) -> None:
        oid = parse_object_id(post_id)
        result = await self._set(oid, to_set_document(update))
        if result.matched_count == 0:
            raise NotFoundError("Post", post_id)

    async def delete(self, post_id: str) -> None:
        oid = parse_object_id(post_id)
        result = await self._delete(oid)
        if result is None or result.deleted_count == 0:
            raise NotFoundError("Post", post_id)

    @translate_db_errors
    async def list(self, page: int, limit: int) -> List[Post]:
        docs = await (
            PostDocument.find_all()
            .sort(*NEWEST_FIRST)
            .skip((page - 1) * limit)
            .limit(limit)
            .to_list()
        )
        return [d.to_model() for d in docs]

    async def get_by_author(self, author_id: str) -> List[Post]:
        oid = parse_object_id(author_id)
        return await self._find_by_author(oid)

    @translate_db_errors
    async def _find_by_author(self, oid) -> List[Post]:
        docs = await PostDocument.find(PostDocument.author_id == oid).sort(*NEWEST_FIRST).to_list()
        return [d.to_model() for d in docs]

    @translate_db_errors
    async def _get(self, oid):
        return await PostDocument.get(oid)

    @translate_db_errors
    async def _set(self, oid, fields):
        return await PostDocument.find_one(PostDocument.id == oid).update(Set(fields))

    @translate_db_errors
    async def _delete(self, oid):
        return await PostDocument.find_one(PostDocument.id == oid).delete()
