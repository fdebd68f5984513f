"""
URL query state for the agent listing.

Parses the listing's query parameters, builds canonical URLs that leave out
every parameter equal to its default, and does the pagination arithmetic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import quote, unquote, urlencode

from .constants import DEFAULT_PAGE_SIZE, PAGE_SIZES
from .models import AgentFilters, AgentId

# Canonical order of known parameters in generated URLs
PARAM_ORDER = ("search", "page", "perPage", "hasReviews", "hasEndpoint")

DEFAULT_PARAMS = {
    "page": "1",
    "perPage": str(DEFAULT_PAGE_SIZE),
}

# Boolean filters are only ever written as "true"
FLAG_PARAMS = ("hasReviews", "hasEndpoint")


def _first(value: Any) -> Optional[str]:
    """Single value of a query parameter (parse_qs yields lists)."""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return None if value is None else str(value)


def _parse_positive_int(value: Optional[str], default: int) -> int:
    try:
        number = int(value.strip()) if value is not None else default
    except ValueError:
        return default
    return number if number >= 1 else default


@dataclass
class ListingParams:
    """Validated listing state taken from URL query parameters."""
    search: str = ""
    page: int = 1
    per_page: int = DEFAULT_PAGE_SIZE
    has_reviews: bool = False
    has_endpoint: bool = False

    @classmethod
    def from_query(cls, query: Optional[Mapping[str, Any]] = None) -> ListingParams:
        """Parse raw query parameters; invalid values fall back to defaults."""
        query = query or {}
        per_page = _parse_positive_int(_first(query.get("perPage")), DEFAULT_PAGE_SIZE)
        return cls(
            search=(_first(query.get("search")) or "").strip(),
            page=_parse_positive_int(_first(query.get("page")), 1),
            per_page=per_page if per_page in PAGE_SIZES else DEFAULT_PAGE_SIZE,
            has_reviews=_first(query.get("hasReviews")) == "true",
            has_endpoint=_first(query.get("hasEndpoint")) == "true",
        )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def filters(self) -> AgentFilters:
        return AgentFilters(
            search=self.search or None,
            has_reviews=self.has_reviews,
            has_endpoint=self.has_endpoint,
        )

    def to_params(self) -> Dict[str, Optional[str]]:
        """Current state as URL parameters (before default elision)."""
        return {
            "search": self.search or None,
            "page": str(self.page),
            "perPage": str(self.per_page),
            "hasReviews": "true" if self.has_reviews else None,
            "hasEndpoint": "true" if self.has_endpoint else None,
        }


def _is_default(key: str, value: str) -> bool:
    if key in FLAG_PARAMS:
        return value != "true"
    return DEFAULT_PARAMS.get(key) == value


def build_url(
    params: Mapping[str, Optional[str]],
    updates: Optional[Mapping[str, Optional[str]]] = None,
    base: str = "/",
) -> str:
    """Build a listing URL from current params plus updates.

    Parameters that are unset, empty or equal to their default are left out,
    so applying the same update twice yields the same URL.
    """
    merged: Dict[str, Optional[str]] = dict(params)
    merged.update(updates or {})

    ordered_keys = [k for k in PARAM_ORDER if k in merged]
    ordered_keys += sorted(k for k in merged if k not in PARAM_ORDER)

    pairs: List[Tuple[str, str]] = []
    for key in ordered_keys:
        value = merged[key]
        if not value or _is_default(key, value):
            continue
        pairs.append((key, value))

    query = urlencode(pairs)
    return f"{base}?{query}" if query else base


def page_size_url(params: Mapping[str, Optional[str]], size: int, base: str = "/") -> str:
    """URL for switching page size; always goes back to the first page."""
    return build_url(params, {"perPage": str(size), "page": None}, base=base)


def total_pages(total: int, per_page: int) -> int:
    """Number of pages needed for ``total`` items."""
    if per_page < 1:
        raise ValueError(f"per_page must be positive, got {per_page}")
    return max(0, -(-total // per_page))


def agent_path(agent_id: AgentId) -> str:
    """Detail page path; the composite id is percent-encoded."""
    return f"/agent/{quote(agent_id, safe='')}"


def decode_agent_id(segment: str) -> AgentId:
    """Percent-decode an agent id taken from a URL path."""
    return unquote(segment)
