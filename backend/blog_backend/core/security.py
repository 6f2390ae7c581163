# 보안/인증 유틸리티
# - 비밀번호 해싱/검증 (passlib bcrypt)
# - JWT 토큰 생성/검증 (PyJWT, HMAC 계열만 허용)
# 두 클래스 모두 설정값을 생성자로 받습니다. 전역 settings 를 직접 읽지 않습니다.

from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

import jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from .exceptions import (
    InvalidTokenSignatureError,
    MalformedTokenError,
    PasswordHashError,
    TokenExpiredError,
)

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL = timedelta(hours=24)


class PasswordHasher:
    def __init__(self, rounds: Optional[int] = None):
        options = {"bcrypt__rounds": rounds} if rounds else {}
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", **options)

    def hash(self, password: str) -> str:
        try:
            return self._context.hash(password)
        except (ValueError, TypeError) as e:
            logger.error(f"[Auth] password hashing failed: {e}")
            raise PasswordHashError() from e

    def verify(self, password: str, hashed_password: str) -> bool:
        # 손상된 해시나 빈 값이어도 예외 대신 False 를 돌려줍니다.
        if not hashed_password:
            return False
        try:
            return self._context.verify(password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("[Auth] stored password hash could not be identified")
            return False


class TokenClaims(BaseModel):
    subject: str
    email: str
    issued_at: datetime
    expires_at: datetime


class TokenManager:
    """세션 토큰 발급/검증

    토큰 payload: {"sub": user id, "email", "iat", "nbf", "exp"}.
    서버에 저장하지 않으므로 폐기 목록은 없습니다. 비밀키가 바뀌면 기존 토큰은 모두 무효가 됩니다.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", ttl: timedelta = DEFAULT_TOKEN_TTL):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        if not algorithm.startswith("HS"):
            raise ValueError(f"only HMAC algorithms are supported, got {algorithm}")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl

    def issue_token(
        self,
        subject: str,
        email: str,
        ttl: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> str:
        now = now or datetime.now(tz=timezone.utc)
        payload = {
            "sub": str(subject),
            "email": email,
            "iat": now,
            "nbf": now,
            "exp": now + (ttl if ttl is not None else self.ttl),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def validate_token(self, token: str) -> TokenClaims:
        try:
            # algorithms 를 하나로 고정해서 alg 헤더 바꿔치기(none, RS256 등)를 막습니다.
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
            raise InvalidTokenSignatureError() from e
        except jwt.PyJWTError as e:
            raise MalformedTokenError() from e

        email = payload.get("email")
        if not isinstance(email, str):
            raise MalformedTokenError()
        return TokenClaims(
            subject=payload["sub"],
            email=email,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
