"""
Page/limit pagination.

Pages are 1-based; limit is clamped to [1, MAX_LIMIT]. Values that are not
integers fall back to the defaults rather than failing the request.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50
MAX_LIMIT = 100


def _to_int(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class Page:
    """Pagination metadata for one page of results."""
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def to_dict(self) -> Dict:
        return {
            'page': self.page,
            'limit': self.limit,
            'total': self.total,
            'totalPages': self.total_pages,
            'hasNext': self.has_next,
            'hasPrev': self.has_prev,
        }


def parse_page_params(params) -> Tuple[int, int]:
    """Read and clamp page/limit from a query-parameter mapping."""
    page = max(1, _to_int(params.get('page'), DEFAULT_PAGE))
    limit = min(MAX_LIMIT, max(1, _to_int(params.get('limit'), DEFAULT_LIMIT)))
    return page, limit


def paginate(queryset, page: int, limit: int) -> Tuple[List, Page]:
    """Slice a queryset and return (rows, Page)."""
    meta = Page(page=page, limit=limit, total=queryset.count())
    rows = list(queryset[meta.offset:meta.offset + limit])
    return rows, meta
