import uuid

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from dashboard.core.security import (
    InvalidSessionToken,
    SessionClaims,
    decode_session_token,
)
from dashboard.db.session import get_db
from dashboard.models.user import User

ACCESS_COOKIE = "access_token"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def get_user_by_id(db: Session, user_id: str | None) -> User | None:
    if not user_id:
        return None
    try:
        key = uuid.UUID(str(user_id))
    except ValueError:
        return None
    return db.query(User).filter(User.id == key).first()


def get_session_claims(request: Request) -> SessionClaims:
    """Valid access cookie, without touching the database."""
    token = request.cookies.get(ACCESS_COOKIE)
    if not token:
        raise _unauthorized("Not authenticated")

    try:
        return decode_session_token(token, "access")
    except InvalidSessionToken:
        raise _unauthorized("Invalid access token")


def get_current_user(
    claims: SessionClaims = Depends(get_session_claims),
    db: Session = Depends(get_db),
) -> User:
    """Session presence gates the dashboard; there are no roles."""
    user = get_user_by_id(db, claims.sub)
    if not user:
        raise _unauthorized("User not found")

    return user
