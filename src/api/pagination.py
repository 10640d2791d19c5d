"""
Listing query parameters.

Parsing is lenient: a malformed, non-positive or oversized `per_page`/`page` falls back to
its default instead of failing the request.
"""
import logging
from dataclasses import dataclass

from fastapi import Query

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
# Keeps page, per_page and the resulting offset inside SQL integer range
MAX_PARAM_VALUE = 2**31 - 1


@dataclass
class ListOptions:
    """Pagination window and search filter for the bookmark listing."""

    per_page: int | None = None  # None means no page size limit
    page: int = DEFAULT_PAGE
    search: str = ""

    @property
    def offset(self) -> int:
        if self.per_page is None:
            return 0
        return (self.page - 1) * self.per_page


def _positive_int(name: str, raw: str | None) -> int | None:
    if raw is None or raw == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning("invalid_query_param", extra={"param": name, "value": raw})
        return None
    if not 1 <= value <= MAX_PARAM_VALUE:
        logger.warning("invalid_query_param", extra={"param": name, "value": raw})
        return None
    return value


def parse_list_options(
    per_page: str | None = Query(default=None, description="Page size (default: unlimited)"),
    page: str | None = Query(default=None, description="1-based page number"),
    search: str = Query(default="", description="Substring of title or url"),
) -> ListOptions:
    """Build ListOptions from raw query values, defaulting anything invalid."""
    size = _positive_int("per_page", per_page)
    number = _positive_int("page", page) or DEFAULT_PAGE
    if size is None:
        # Without a page size everything fits on the first page
        number = DEFAULT_PAGE
    return ListOptions(per_page=size, page=number, search=search)
