"""Filter criteria parsing and predicate building for log records."""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Mapping

from logquery.errors import MalformedFilterInput
from logquery.models import LogRecord, parse_instant

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50


@dataclass(frozen=True)
class FilterCriteria:
    level: str | None = None
    message: str | None = None
    resource_id: str | None = None
    trace_id: str | None = None
    span_id: str | None = None
    commit: str | None = None
    timestamp: datetime | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT


def _text(args: Mapping, key: str) -> str | None:
    value = args.get(key)
    if value is None or value == "":
        return None
    return str(value)


def _instant(args: Mapping, key: str) -> datetime | None:
    value = _text(args, key)
    if value is None:
        return None
    try:
        return parse_instant(value)
    except ValueError:
        raise MalformedFilterInput(f"{key} must be an ISO-8601 date or date-time.") from None


def _positive_int(args: Mapping, key: str, default: int) -> int:
    """Non-numeric falls back to ``default``; anything below 1 becomes 1."""
    value = _text(args, key)
    if value is None:
        return default
    try:
        number = int(value.strip())
    except ValueError:
        return default
    return max(number, 1)


def parse_criteria(
    args: Mapping,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int | None = None,
) -> FilterCriteria:
    """Build FilterCriteria from raw query-string arguments."""
    limit = _positive_int(args, "limit", default_limit)
    if max_limit is not None:
        limit = min(limit, max_limit)

    return FilterCriteria(
        level=_text(args, "level"),
        message=_text(args, "message"),
        resource_id=_text(args, "resourceId"),
        trace_id=_text(args, "traceId"),
        span_id=_text(args, "spanId"),
        commit=_text(args, "commit"),
        timestamp=_instant(args, "timestamp"),
        date_from=_instant(args, "dateRange[from]"),
        date_to=_instant(args, "dateRange[to]"),
        page=_positive_int(args, "page", DEFAULT_PAGE),
        limit=limit,
    )


def filter_by_message(record: LogRecord, keyword: str) -> bool:
    """True if keyword appears in the message (case-insensitive)."""
    return keyword.lower() in record.message.lower()


def filter_by_date_range(record: LogRecord, start: datetime | None, end: datetime | None) -> bool:
    """True if the record's instant lies in [start, end]. Either bound may be None."""
    instant = record.instant
    if instant is None:
        return False
    if start is not None and instant < start:
        return False
    if end is not None and instant > end:
        return False
    return True


def build_predicate(criteria: FilterCriteria) -> Callable[[LogRecord], bool]:
    """Combine all present criteria into a single callable that ANDs them."""
    predicates = []

    if criteria.level:
        predicates.append(lambda r, v=criteria.level: r.level == v)

    if criteria.message:
        predicates.append(lambda r, k=criteria.message: filter_by_message(r, k))

    if criteria.resource_id:
        predicates.append(lambda r, v=criteria.resource_id: r.resource_id == v)

    if criteria.trace_id:
        predicates.append(lambda r, v=criteria.trace_id: r.trace_id == v)

    if criteria.span_id:
        predicates.append(lambda r, v=criteria.span_id: r.span_id == v)

    if criteria.commit:
        predicates.append(lambda r, v=criteria.commit: r.commit == v)

    if criteria.timestamp is not None:
        predicates.append(lambda r, t=criteria.timestamp: filter_by_date_range(r, t, None))

    if criteria.date_from is not None or criteria.date_to is not None:
        predicates.append(
            lambda r, s=criteria.date_from, e=criteria.date_to: filter_by_date_range(r, s, e)
        )

    if not predicates:
        return lambda record: True

    def combined(record: LogRecord) -> bool:
        return all(p(record) for p in predicates)

    return combined
