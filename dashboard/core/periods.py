from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict

RANGE_KEYS = ("today", "7d", "30d", "90d", "ytd")
DEFAULT_RANGE = "30d"

_ROLLING_DAYS = {"7d": 7, "30d": 30, "90d": 90}


class PeriodWindow(BaseModel):
    """Half-open UTC range: start <= ts < end."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @property
    def length(self) -> timedelta:
        return self.end - self.start


class PeriodWindows(BaseModel):
    model_config = ConfigDict(frozen=True)

    range: str
    current: PeriodWindow
    previous: PeriodWindow


def get_timezone(name: str | None) -> tzinfo:
    """
    Raises ValueError for names the tz database does not know.
    """
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown time zone: {name}")


def normalize_range(range_key: str | None) -> str:
    if range_key in RANGE_KEYS:
        return range_key
    return DEFAULT_RANGE


def _window(start: datetime, end: datetime) -> PeriodWindow:
    return PeriodWindow(
        start=start.astimezone(timezone.utc), end=end.astimezone(timezone.utc)
    )


def resolve_period(
    range_key: str | None,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> PeriodWindows:
    """
    Map a range keyword to the current window and the comparison window.

    Every boundary is derived from the single ``now`` snapshot; calendar
    boundaries (midnight, Jan 1) are taken in ``tz``.
    """
    key = normalize_range(range_key)
    tz = tz or timezone.utc
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    local_now = now.astimezone(tz)

    if key == "today":
        midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
        # aware arithmetic in the same zone is wall-clock, so DST days stay whole
        current = _window(midnight, now)
        previous = _window(midnight - timedelta(days=1), midnight)
    elif key == "ytd":
        jan1 = datetime(local_now.year, 1, 1, tzinfo=tz)
        prev_jan1 = datetime(local_now.year - 1, 1, 1, tzinfo=tz)
        current = _window(jan1, now)
        previous = _window(prev_jan1, jan1)
    else:
        span = timedelta(days=_ROLLING_DAYS[key])
        start = now - span
        current = _window(start, now)
        previous = _window(start - span, start)

    return PeriodWindows(range=key, current=current, previous=previous)
