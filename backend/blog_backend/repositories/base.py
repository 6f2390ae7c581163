# 저장소 공통 정의
# - UserRepository / PostRepository: 서비스가 의존하는 인터페이스 (Protocol)
#   MongoDB 구현은 user_repository.py / post_repository.py, 테스트는 in-memory 구현을 사용
# - ObjectId 검증, 부분 수정 변환, PyMongo 예외 변환 헬퍼

from functools import wraps
from typing import Any, Dict, List, Optional, Protocol
import logging

from bson import ObjectId
from pydantic import BaseModel
from pymongo.errors import PyMongoError

from ..core.exceptions import DatabaseError, DatabaseTimeoutError, InvalidObjectIdError
from ..models.post import Post, PostUpdate
from ..models.user import User, UserUpdate

logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    async def create(self, user: User) -> User: ...

    async def get_by_email(self, email: str) -> Optional[User]: ...

    async def get_by_id(self, user_id: str) -> User: ...

    async def update(self, user_id: str, update: UserUpdate) -> None: ...

    async def delete(self, user_id: str) -> None: ...


class PostRepository(Protocol):
    async def create(self, post: Post) -> Post: ...

    async def get_by_id(self, post_id: str) -> Post: ...

    async def update(self, post_id: str, update: PostUpdate) -> None: ...

    async def delete(self, post_id: str) -> None: ...

    async def list(self, page: int, limit: int) -> List[Post]: ...

    async def get_by_author(self, author_id: str) -> List[Post]: ...


def parse_object_id(value: str) -> ObjectId:
    """문자열 id 를 ObjectId 로 변환. 형식이 틀리면 DB 호출 전에 InvalidObjectIdError."""
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidObjectIdError(str(value))
    return ObjectId(value)


def to_set_document(update: BaseModel) -> Dict[str, Any]:
    # None 은 "변경하지 않음"을 뜻합니다. 값이 있는 필드만 $set 에 들어갑니다.
    return update.model_dump(exclude_none=True)


def translate_db_errors(func):
    """PyMongo 예외를 DatabaseError / DatabaseTimeoutError 로 바꿉니다. 원인은 로그에만 남깁니다."""

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except PyMongoError as e:
            logger.error(f"[MongoDB] {func.__qualname__} failed: {e}", exc_info=True)
            if getattr(e, "timeout", False):
                raise DatabaseTimeoutError() from e
            raise DatabaseError() from e

    return wrapper
