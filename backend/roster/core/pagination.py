"""Pagination: lenient query-param normalization and page arithmetic.

Invariants:
    - page is always within [1, MAX_PAGE] (unparsable or out of range falls back to 1)
    - limit is always within [1, MAX_LIMIT] (unparsable or out of range falls back to DEFAULT_LIMIT)
    - offset = (page - 1) * limit
    - total_pages = ceil(total / limit), 0 when total is 0
"""

DEFAULT_PAGE: int = 1
DEFAULT_LIMIT: int = 20
MAX_LIMIT: int = 100
# Largest page whose offset still fits a signed 64-bit SQL integer
MAX_PAGE: int = (2**63 - 1) // MAX_LIMIT


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def normalize_page(raw: str | None) -> int:
    page = _parse_int(raw)
    if page is None or page < 1 or page > MAX_PAGE:
        return DEFAULT_PAGE
    return page


def normalize_limit(raw: str | None) -> int:
    # Out-of-range limits reset to the default rather than clamping to the bound
    limit = _parse_int(raw)
    if limit is None or limit < 1 or limit > MAX_LIMIT:
        return DEFAULT_LIMIT
    return limit


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    return (total + limit - 1) // limit
