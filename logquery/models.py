"""Log record model, level set, and ISO-8601 timestamp parsing."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

LOG_LEVELS = ("error", "warning", "info")

# Declared order matters: validation reports the first missing field.
REQUIRED_LOG_FIELDS = (
    "level",
    "message",
    "resourceId",
    "timestamp",
    "traceId",
    "spanId",
    "commit",
    "metadata",
)


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 date or date-time into an aware UTC datetime.

    Accepts a trailing ``Z``. Naive values and bare dates are taken as UTC.
    Raises ValueError for anything unparseable.
    """
    if not isinstance(value, str):
        raise ValueError(f"not a string: {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        raise ValueError(f"out of range once converted to UTC: {value!r}") from None


@dataclass(frozen=True)
class LogRecord:
    id: int
    level: str
    message: str
    resource_id: str
    timestamp: str
    trace_id: str
    span_id: str
    commit: str
    metadata: dict = field(default_factory=dict)

    @property
    def instant(self) -> datetime | None:
        """Parsed timestamp, or None if the stored value is not ISO-8601."""
        try:
            return parse_instant(self.timestamp)
        except ValueError:
            return None

    @classmethod
    def from_dict(cls, d: dict, record_id: int | None = None) -> "LogRecord":
        return cls(
            id=d["id"] if record_id is None else record_id,
            level=d["level"],
            message=d["message"],
            resource_id=d["resourceId"],
            timestamp=d["timestamp"],
            trace_id=d["traceId"],
            span_id=d["spanId"],
            commit=d["commit"],
            metadata=d["metadata"],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "level": self.level,
            "message": self.message,
            "resourceId": self.resource_id,
            "timestamp": self.timestamp,
            "traceId": self.trace_id,
            "spanId": self.span_id,
            "commit": self.commit,
            "metadata": self.metadata,
        }
