from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dashboard.core.periods import DEFAULT_RANGE, normalize_range
from dashboard.core.signup_query import DEFAULT_PAGE_SIZE, PAGE_SIZES

EventKind = Literal[
    "set_range",
    "set_page",
    "set_page_size",
    "set_search",
    "toggle_theme",
    "refresh",
]


class ViewState(BaseModel):
    """
    Everything the dashboard view filters on. Changed only by
    reduce_view_state so refetch rules live in one place.
    """

    model_config = ConfigDict(frozen=True)

    range: str = DEFAULT_RANGE
    page: int = Field(default=1, ge=1)
    page_size: int = DEFAULT_PAGE_SIZE
    search: str = ""
    theme: Literal["light", "dark"] = "light"
    # bumped on every transition that refetches; the client sends it with those
    # fetches and drops any reply whose echoed seq is older than this
    seq: int = 0

    @field_validator("page_size")
    @classmethod
    def _known_page_size(cls, v: int) -> int:
        if v not in PAGE_SIZES:
            raise ValueError(f"page_size must be one of {PAGE_SIZES}")
        return v


class ViewEvent(BaseModel):
    kind: EventKind
    value: str | int | None = None


class ViewTransition(BaseModel):
    state: ViewState
    refetch_metrics: bool = False
    refetch_table: bool = False


def _refetch(state: ViewState, *, metrics: bool, **changes) -> ViewTransition:
    changes["seq"] = state.seq + 1
    return ViewTransition(
        state=state.model_copy(update=changes),
        refetch_metrics=metrics,
        refetch_table=True,
    )


def reduce_view_state(state: ViewState, event: ViewEvent) -> ViewTransition:
    """
    Apply one user action. Raises ValueError when the event value is unusable.
    """
    kind = event.kind

    if kind == "set_range":
        return _refetch(
            state, metrics=True, range=normalize_range(str(event.value)), page=1
        )

    if kind == "set_search":
        term = "" if event.value is None else str(event.value)
        return _refetch(state, metrics=False, search=term, page=1)

    if kind == "set_page_size":
        size = _as_int(event.value)
        if size not in PAGE_SIZES:
            raise ValueError(f"page_size must be one of {PAGE_SIZES}")
        return _refetch(state, metrics=False, page_size=size, page=1)

    if kind == "set_page":
        return _refetch(state, metrics=False, page=max(1, _as_int(event.value)))

    if kind == "refresh":
        return _refetch(state, metrics=True)

    # toggle_theme
    theme = "dark" if state.theme == "light" else "light"
    return ViewTransition(state=state.model_copy(update={"theme": theme}))


def _as_int(value: str | int | None) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Expected an integer, got {value!r}")
