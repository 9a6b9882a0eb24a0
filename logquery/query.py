"""Query engine: filter, newest-first stable sort, offset pagination."""

import math
from dataclasses import dataclass
from datetime import datetime, timezone

from logquery.filters import FilterCriteria, build_predicate
from logquery.models import LogRecord

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class ResultPage:
    records: list[LogRecord]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    def to_dict(self) -> dict:
        return {
            "status": "success",
            "data": [r.to_dict() for r in self.records],
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages,
        }


def sort_by_timestamp(records: list[LogRecord]) -> list[LogRecord]:
    """Newest first. Ties keep their input order; unparseable timestamps go last."""
    return sorted(records, key=lambda r: r.instant or _OLDEST, reverse=True)


def paginate(records: list[LogRecord], page: int, limit: int) -> list[LogRecord]:
    if page < 1 or limit < 1:
        raise ValueError(f"page and limit must be >= 1 (got page={page}, limit={limit})")
    start = (page - 1) * limit
    return records[start:start + limit]


def run_query(records: list[LogRecord], criteria: FilterCriteria) -> ResultPage:
    predicate = build_predicate(criteria)
    matched = sort_by_timestamp([r for r in records if predicate(r)])
    return ResultPage(
        records=paginate(matched, criteria.page, criteria.limit),
        total=len(matched),
        page=criteria.page,
        limit=criteria.limit,
    )
