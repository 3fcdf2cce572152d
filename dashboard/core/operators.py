import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from dashboard.core.config import settings
from dashboard.core.security import hash_password
from dashboard.models.user import User

logger = logging.getLogger("dashboard.operators")


def create_operator(db: Session, username: str, password: str) -> User:
    user = User(username=username.strip(), password_hash=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def ensure_bootstrap_operator(db: Session) -> User | None:
    """
    Create the configured operator when no operator exists yet.
    Does nothing when ADMIN_USERNAME/ADMIN_PASSWORD are unset.
    """
    if not settings.ADMIN_USERNAME or not settings.ADMIN_PASSWORD:
        return None

    count = int(db.query(func.count(User.id)).scalar() or 0)
    if count:
        return None

    user = create_operator(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
    logger.info("Created bootstrap operator username=%s", user.username)
    return user
