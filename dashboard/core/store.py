import logging

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from dashboard.core.periods import PeriodWindow
from dashboard.core.signup_query import SignupPageRequest, escape_like
from dashboard.models.signup import Signup

logger = logging.getLogger("dashboard.store")


class RecordStoreError(Exception):
    """The record store rejected or failed a query. Empty results are not errors."""


def _in_window(db: Session, window: PeriodWindow) -> Query:
    return db.query(Signup).filter(
        Signup.signup_date >= window.start, Signup.signup_date < window.end
    )


def fetch_signups_in(db: Session, window: PeriodWindow) -> list[Signup]:
    try:
        return _in_window(db, window).all()
    except SQLAlchemyError as exc:
        logger.exception(
            "Error fetching signups start=%s end=%s", window.start, window.end
        )
        raise RecordStoreError("signups query failed") from exc


def fetch_signup_page(
    db: Session, request: SignupPageRequest
) -> tuple[list[Signup], int]:
    """
    Returns (rows, total) where total counts the filtered set before paging.
    """
    q = _in_window(db, request.window)

    if request.search:
        pattern = f"%{escape_like(request.search)}%"
        q = q.filter(
            or_(
                *(
                    getattr(Signup, field).ilike(pattern, escape="\\")
                    for field in request.search_fields
                )
            )
        )

    column = getattr(Signup, request.order_by)
    try:
        total = q.order_by(None).count() if request.with_count else 0
        rows = (
            q.order_by(column.desc() if request.descending else column.asc())
            .slice(request.offset, request.range_end + 1)
            .all()
        )
    except SQLAlchemyError as exc:
        logger.exception(
            "Error fetching signup page rows=%s-%s",
            request.offset,
            request.range_end,
        )
        raise RecordStoreError("signups page query failed") from exc

    return rows, total
