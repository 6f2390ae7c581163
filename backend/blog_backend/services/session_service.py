# 세션(회원) 서비스 레이어
# - 회원가입: 이메일 중복 체크 -> 비밀번호 해싱 -> 저장
# - 로그인: 비밀번호 검증 후 JWT 발급
# - 회원정보 수정/삭제/조회
#
# 주의: 이메일 중복 체크는 "조회 후 저장" 두 단계라서 트랜잭션이 아닙니다.
# 같은 이메일로 동시에 가입하면 둘 다 통과할 수 있습니다 (알려진 제약).

from datetime import datetime, timezone
from typing import Callable
import logging

from ..core.exceptions import (
    BlogServiceError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
)
from ..core.security import PasswordHasher, TokenManager
from ..models.user import User, UserPatch, UserUpdate
from ..repositories.base import UserRepository

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class SessionService:
    def __init__(
        self,
        repo: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenManager,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repo = repo
        self.hasher = hasher
        self.tokens = tokens
        self.clock = clock

    async def register(self, username: str, email: str, password: str) -> User:
        existing = await self.repo.get_by_email(email)
        if existing:
            raise EmailAlreadyRegisteredError()

        hashed = self.hasher.hash(password)
        now = self.clock()
        user = User(
            username=username,
            email=email,
            password_hash=hashed,
            created_at=now,
            updated_at=now,
        )
        created = await self.repo.create(user)
        logger.info(f"[Auth] registered user {created.id}")
        return created

    async def login(self, email: str, password: str) -> str:
        # 사용자 없음 / 조회 실패 / 비밀번호 불일치를 모두 같은 에러로 돌려서
        # 가입 여부가 노출되지 않게 합니다.
        try:
            user = await self.repo.get_by_email(email)
        except BlogServiceError as e:
            logger.warning(f"[Auth] login lookup failed: {e.message}")
            raise InvalidCredentialsError() from e

        if not user or not self.hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError()

        return self.tokens.issue_token(user.id, user.email)

    async def update_user(self, user_id: str, patch: UserPatch) -> None:
        if patch.email is not None:
            owner = await self.repo.get_by_email(patch.email)
            if owner and owner.id != user_id:
                raise EmailAlreadyRegisteredError()

        update = UserUpdate(
            username=patch.username,
            email=patch.email,
            password_hash=self.hasher.hash(patch.password) if patch.password is not None else None,
            updated_at=self.clock(),
        )
        await self.repo.update(user_id, update)

    async def delete_user(self, user_id: str) -> None:
        # 작성한 게시글은 함께 지우지 않습니다.
        await self.repo.delete(user_id)
        logger.info(f"[Auth] deleted user {user_id}")

    async def get_user(self, user_id: str) -> User:
        return await self.repo.get_by_id(user_id)
