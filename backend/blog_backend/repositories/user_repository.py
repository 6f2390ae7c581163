# 사용자 저장소 레이어 (MongoDB / Beanie)
# - 데이터 접근(조회/생성/수정/삭제)만 담당 (서비스 로직 분리)

from typing import Optional

from beanie.operators import Set

from ..core.exceptions import NotFoundError
from ..models.user import User, UserDocument, UserUpdate
from .base import parse_object_id, to_set_document, translate_db_errors


class BeanieUserRepository:
    @translate_db_errors
    async def create(self, user: User) -> User:
        doc = await UserDocument.from_model(user).insert()
        return doc.to_model()

    @translate_db_errors
    async def get_by_email(self, email: str) -> Optional[User]:
        doc = await UserDocument.find_one(UserDocument.email == email)
        return doc.to_model() if doc else None

    async def get_by_id(self, user_id: str) -> User:
        oid = parse_object_id(user_id)
        doc = await self._get(oid)
        if doc is None:
            raise NotFoundError("User", user_id)
        return doc.to_model()

    async def update(self, user_id: str, update: UserUpdate) -> None:
        oid = parse_object_id(user_id)
        result = await self._set(oid, to_set_document(update))
        if result.matched_count == 0:
            raise NotFoundError("User", user_id)

    async def delete(self, user_id: str) -> None:
        oid = parse_object_id(user_id)
        result = await self._delete(oid)
        if result is None or result.deleted_count == 0:
            raise NotFoundError("User", user_id)

    @translate_db_errors
    async def _get(self, oid):
        return await UserDocument.get(oid)

    @translate_db_errors
    async def _set(self, oid, fields):
        return await UserDocument.find_one(UserDocument.id == oid).update(Set(fields))

    @translate_db_errors
    async def _delete(self, oid):
        return await UserDocument.find_one(UserDocument.id == oid).delete()
