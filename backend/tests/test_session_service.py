# 세션 서비스 테스트 (in-memory 저장소 사용)
import asyncio
from unittest.mock import AsyncMock

import pytest

from blog_backend.core.exceptions import (
    ConflictError,
    DatabaseError,
    InvalidCredentialsError,
    InvalidObjectIdError,
    NotFoundError,
)
from blog_backend.models.user import UserPatch
from blog_backend.services.session_service import SessionService


@pytest.fixture
def service(user_repo, hasher, tokens, clock):
    return SessionService(user_repo, hasher, tokens, clock=clock)


def register(service, username="alice", email="alice@example.com", password="secret1"):
    return asyncio.run(service.register(username, email, password))


def test_register_hashes_password_and_stamps_timestamps(service, hasher):
    user = register(service)
    assert user.id
    assert user.password_hash != "secret1"
    assert hasher.verify("secret1", user.password_hash)
    assert user.created_at == user.updated_at


def test_duplicate_email_is_a_conflict(service):
    register(service, "a", "dup@x.com", "secret1")
    with pytest.raises(ConflictError):
        register(service, "b", "dup@x.com", "secret2")


def test_concurrent_duplicate_registration_can_both_pass(service, user_repo):
    # 이메일 중복 검사는 트랜잭션이 아니므로 동시에 들어오면 둘 다 통과할 수 있습니다.
    async def race():
        return await asyncio.gather(
            service.register("a", "race@x.com", "secret1"),
            service.register("b", "race@x.com", "secret2"),
        )

    first, second = asyncio.run(race())
    assert first.id != second.id
    assert sum(1 for u in user_repo.users.values() if u.email == "race@x.com") == 2


def test_login_returns_token_for_user(service, tokens):
    user = register(service)
    token = asyncio.run(service.login("alice@example.com", "secret1"))
    claims = tokens.validate_token(token)
    assert claims.subject == user.id
    assert claims.email == "alice@example.com"


def test_unknown_email_and_wrong_password_look_the_same(service):
    register(service)
    with pytest.raises(InvalidCredentialsError) as unknown:
        asyncio.run(service.login("nouser@x.com", "x"))
    with pytest.raises(InvalidCredentialsError) as wrong:
        asyncio.run(service.login("alice@example.com", "wrongpass"))
    assert type(unknown.value) is type(wrong.value)
    assert unknown.value.message == wrong.value.message


def test_login_lookup_failure_is_reported_as_invalid_credentials(hasher, tokens):
    repo = AsyncMock()
    repo.get_by_email.side_effect = DatabaseError()
    with pytest.raises(InvalidCredentialsError):
        asyncio.run(SessionService(repo, hasher, tokens).login("a@x.com", "secret1"))


def test_password_change_invalidates_old_password(service):
    user = register(service, password="old-secret")
    asyncio.run(service.update_user(user.id, UserPatch(password="new-secret")))

    assert asyncio.run(service.login("alice@example.com", "new-secret"))
    with pytest.raises(InvalidCredentialsError):
        asyncio.run(service.login("alice@example.com", "old-secret"))


def test_update_touches_only_given_fields(service, user_repo):
    user = register(service)
    asyncio.run(service.update_user(user.id, UserPatch(username="alice2")))

    stored = user_repo.users[user.id]
    assert stored.username == "alice2"
    assert stored.email == user.email
    assert stored.password_hash == user.password_hash
    assert stored.created_at == user.created_at
    assert stored.updated_at > user.updated_at


def test_update_to_email_of_another_user_is_a_conflict(service):
    register(service, "a", "a@x.com")
    b = register(service, "b", "b@x.com")
    with pytest.raises(ConflictError):
        asyncio.run(service.update_user(b.id, UserPatch(email="a@x.com")))


def test_update_to_own_email_is_allowed(service, user_repo):
    user = register(service, "a", "a@x.com")
    asyncio.run(service.update_user(user.id, UserPatch(email="a@x.com", username="z")))
    assert user_repo.users[user.id].username == "z"


def test_update_unknown_user_is_not_found(service):
    with pytest.raises(NotFoundError):
        asyncio.run(service.update_user("507f1f77bcf86cd799439011", UserPatch(username="x")))


def test_delete_user(service, user_repo):
    user = register(service)
    asyncio.run(service.delete_user(user.id))
    assert user.id not in user_repo.users
    with pytest.raises(NotFoundError):
        asyncio.run(service.get_user(user.id))


def test_get_user_with_malformed_id(service):
    with pytest.raises(InvalidObjectIdError):
        asyncio.run(service.get_user("not-an-object-id"))
