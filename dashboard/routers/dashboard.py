from datetime import tzinfo

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from dashboard.core.config import settings
from dashboard.core.deps import get_current_user
from dashboard.core.formatting import present_signup
from dashboard.core.metrics import compute_snapshot
from dashboard.core.periods import DEFAULT_RANGE, get_timezone, resolve_period
from dashboard.core.signup_query import (
    DEFAULT_PAGE_SIZE,
    build_signup_page_request,
    page_numbers,
    showing_bounds,
    total_pages,
)
from dashboard.core.store import fetch_signup_page, fetch_signups_in
from dashboard.core.view_state import (
    ViewEvent,
    ViewState,
    ViewTransition,
    reduce_view_state,
)
from dashboard.db.session import get_db
from dashboard.models.user import User
from dashboard.schemas.dashboard import MetricsOut, SignupPageOut, WindowOut

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class ViewStateIn(BaseModel):
    state: ViewState = ViewState()
    event: ViewEvent


def _viewer_tz(tz: str | None) -> tzinfo:
    try:
        return get_timezone(tz or settings.DISPLAY_TIMEZONE)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/metrics", response_model=MetricsOut)
def metrics(
    date_range: str = Query(DEFAULT_RANGE, alias="range"),
    tz: str | None = None,
    seq: int | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """
    Cards and funnel for the selected range against the preceding period.
    Unknown range keywords fall back to 30d.
    """
    windows = resolve_period(date_range, tz=_viewer_tz(tz))

    current = fetch_signups_in(db, windows.current)
    previous = fetch_signups_in(db, windows.previous)

    return MetricsOut(
        range=windows.range,
        current_window=WindowOut(
            start_utc=windows.current.start, end_utc=windows.current.end
        ),
        previous_window=WindowOut(
            start_utc=windows.previous.start, end_utc=windows.previous.end
        ),
        metrics=compute_snapshot(
            current, previous, activation_rate_target=settings.ACTIVATION_RATE_TARGET
        ),
        seq=seq,
    )


@router.get("/signups", response_model=SignupPageOut)
def signups(
    date_range: str = Query(DEFAULT_RANGE, alias="range"),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE),
    search: str | None = Query(None, max_length=200),
    tz: str | None = None,
    seq: int | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    viewer_tz = _viewer_tz(tz)
    windows = resolve_period(date_range, tz=viewer_tz)

    try:
        request = build_signup_page_request(windows.current, page, page_size, search)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    rows, total = fetch_signup_page(db, request)
    first, last = showing_bounds(page, page_size, total)
    pages = total_pages(total, page_size)

    return SignupPageOut(
        range=windows.range,
        items=[present_signup(row, viewer_tz) for row in rows],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=pages,
        pages=page_numbers(page, pages),
        showing_from=first,
        showing_to=last,
        search=request.search,
        seq=seq,
    )


@router.post("/view-state", response_model=ViewTransition)
def view_state(payload: ViewStateIn, user: User = Depends(get_current_user)):
    """
    Apply one filter action and report which fetches it triggers.
    The returned state's seq should be sent with those fetches.
    """
    try:
        return reduce_view_state(payload.state, payload.event)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
