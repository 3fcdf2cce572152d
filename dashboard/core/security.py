import secrets
from datetime import datetime, timedelta, timezone
from typing import Literal

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ValidationError

from dashboard.core.config import settings
from dashboard.models.user import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGO = "HS256"

TokenType = Literal["access", "refresh"]


class InvalidSessionToken(Exception):
    pass


class SessionClaims(BaseModel):
    """What a session cookie asserts about the operator holding it."""

    sub: str
    username: str
    type: TokenType
    jti: str | None = None  # refresh tokens only; must match users.refresh_jti


class SessionTokens(BaseModel):
    access: str
    refresh: str
    jti: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def _encode(claims: SessionClaims, ttl: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = claims.model_dump(exclude_none=True)
    payload.update(iss=settings.JWT_ISSUER, iat=now, exp=now + ttl)
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGO)


def issue_session(user: User) -> SessionTokens:
    """
    Mint an access/refresh pair. The caller stores the returned jti on the
    user so older refresh tokens stop working.
    """
    jti = secrets.token_hex(16)
    sub = str(user.id)
    access = _encode(
        SessionClaims(sub=sub, username=user.username, type="access"),
        timedelta(minutes=settings.ACCESS_TTL_MIN),
    )
    refresh = _encode(
        SessionClaims(sub=sub, username=user.username, type="refresh", jti=jti),
        timedelta(days=settings.REFRESH_TTL_DAYS),
    )
    return SessionTokens(access=access, refresh=refresh, jti=jti)


def decode_session_token(token: str, expected: TokenType) -> SessionClaims:
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[ALGO], issuer=settings.JWT_ISSUER
        )
        claims = SessionClaims.model_validate(payload)
    except (JWTError, ValidationError) as exc:
        raise InvalidSessionToken(str(exc)) from exc

    if claims.type != expected:
        raise InvalidSessionToken(f"expected {expected} token, got {claims.type}")
    if expected == "refresh" and not claims.jti:
        raise InvalidSessionToken("refresh token without jti")
    return claims
