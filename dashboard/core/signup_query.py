import math

from pydantic import BaseModel, ConfigDict

from dashboard.core.periods import PeriodWindow

PAGE_SIZES = (25, 50, 100)
DEFAULT_PAGE_SIZE = 25
SEARCH_FIELDS = ("email", "business_name", "country")
ELLIPSIS = "..."


class SignupPageRequest(BaseModel):
    """
    Description of one table fetch: window filter, optional search, newest
    first, rows [offset, offset + limit - 1], plus the exact filtered count.
    """

    model_config = ConfigDict(frozen=True)

    window: PeriodWindow
    search: str | None = None
    search_fields: tuple[str, ...] = SEARCH_FIELDS
    order_by: str = "signup_date"
    descending: bool = True
    offset: int
    limit: int
    with_count: bool = True

    @property
    def range_end(self) -> int:
        return self.offset + self.limit - 1


def build_signup_page_request(
    window: PeriodWindow,
    page: int,
    page_size: int,
    search: str | None = None,
) -> SignupPageRequest:
    if page_size not in PAGE_SIZES:
        raise ValueError(
            f"page_size must be one of {', '.join(str(s) for s in PAGE_SIZES)}"
        )
    if page < 1:
        raise ValueError("page must be >= 1")

    term = (search or "").strip() or None
    return SignupPageRequest(
        window=window,
        search=term,
        offset=(page - 1) * page_size,
        limit=page_size,
    )


def escape_like(term: str, escape: str = "\\") -> str:
    """Make %, _ and the escape char match literally in a LIKE pattern."""
    return (
        term.replace(escape, escape * 2)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )


def total_pages(total: int, page_size: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / page_size)


def page_numbers(current: int, pages: int) -> list[int | str]:
    if pages <= 7:
        return list(range(1, pages + 1))

    out: list[int | str] = [1]
    if current > 3:
        out.append(ELLIPSIS)
    out.extend(range(max(2, current - 1), min(pages - 1, current + 1) + 1))
    if current < pages - 2:
        out.append(ELLIPSIS)
    out.append(pages)
    return out


def showing_bounds(page: int, page_size: int, total: int) -> tuple[int, int]:
    if total <= 0:
        return 0, 0
    first = (page - 1) * page_size + 1
    if first > total:
        return 0, 0
    return first, min(page * page_size, total)
