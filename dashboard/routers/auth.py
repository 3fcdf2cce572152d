import logging

from fastapi import APIRouter, Depends, HTTPException, Response, Request
from sqlalchemy.orm import Session

from dashboard.core.config import settings
from dashboard.core.deps import ACCESS_COOKIE, get_session_claims, get_user_by_id
from dashboard.core.security import (
    InvalidSessionToken,
    SessionClaims,
    decode_session_token,
    issue_session,
    verify_password,
)
from dashboard.db.session import get_db
from dashboard.models.user import User
from dashboard.schemas.auth import LoginIn, SessionOut

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("dashboard.auth")

REFRESH_COOKIE = "refresh_token"
LOGIN_FAILED = "Invalid username or password"


def _set_auth_cookies(resp: Response, access: str, refresh: str):
    common = dict(
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
    if settings.COOKIE_DOMAIN:
        common["domain"] = settings.COOKIE_DOMAIN

    # access cookie (short)
    resp.set_cookie(
        key=ACCESS_COOKIE,
        value=access,
        max_age=settings.ACCESS_TTL_MIN * 60,
        **common,
    )
    # refresh cookie (long)
    resp.set_cookie(
        key=REFRESH_COOKIE,
        value=refresh,
        max_age=settings.REFRESH_TTL_DAYS * 24 * 3600,
        **common,
    )


def _clear_auth_cookies(resp: Response):
    common = dict(path="/")
    if settings.COOKIE_DOMAIN:
        common["domain"] = settings.COOKIE_DOMAIN
    resp.delete_cookie(ACCESS_COOKIE, **common)
    resp.delete_cookie(REFRESH_COOKIE, **common)


def _start_session(db: Session, user: User, response: Response) -> SessionOut:
    tokens = issue_session(user)
    user.refresh_jti = tokens.jti
    db.add(user)
    db.commit()

    _set_auth_cookies(response, tokens.access, tokens.refresh)

    return SessionOut(id=str(user.id), username=user.username)


@router.post("/login", response_model=SessionOut)
def login(payload: LoginIn, response: Response, db: Session = Depends(get_db)):
    username = payload.username.strip()
    user = db.query(User).filter(User.username == username).first()

    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("Login rejected username=%s", username)
        raise HTTPException(status_code=401, detail=LOGIN_FAILED)

    return _start_session(db, user, response)


@router.get("/session", response_model=SessionOut)
def current_session(claims: SessionClaims = Depends(get_session_claims)):
    return SessionOut(id=claims.sub, username=claims.username)


@router.post("/refresh")
def refresh(request: Request, response: Response, db: Session = Depends(get_db)):
    token = request.cookies.get(REFRESH_COOKIE)
    if not token:
        raise HTTPException(status_code=401, detail="Missing refresh token")

    try:
        claims = decode_session_token(token, "refresh")
    except InvalidSessionToken:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    user = get_user_by_id(db, claims.sub)
    if not user or not user.refresh_jti or user.refresh_jti != claims.jti:
        raise HTTPException(status_code=401, detail="Refresh token revoked")

    # rotate
    _start_session(db, user, response)
    return {"ok": True}


@router.post("/logout")
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    # revoke the refresh token if one is presented; logout itself always succeeds
    token = request.cookies.get(REFRESH_COOKIE)
    if token:
        try:
            claims = decode_session_token(token, "refresh")
        except InvalidSessionToken:
            claims = None
        if claims is not None:
            user = get_user_by_id(db, claims.sub)
            if user and user.refresh_jti == claims.jti:
                user.refresh_jti = None
                db.add(user)
                db.commit()

    _clear_auth_cookies(response)
    return {"ok": True}
