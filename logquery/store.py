"""JSON file record store with atomic replace and a single-writer lock."""

import json
import logging
import os
import tempfile
import threading

from logquery.errors import StoreUnavailable
from logquery.models import LogRecord

logger = logging.getLogger(__name__)


class RecordStore:
    """Owns the persisted log collection.

    The file holds ``{"last_id": N, "logs": [...]}``. ``last_id`` is the
    monotonic id counter and never goes down, so ids stay unique even after
    records are removed through ``replace_all``. A bare JSON array (the older
    layout) is read as well, with the counter taken from the largest id.

    Every write goes through a temp file and ``os.replace``, so readers see
    either the previous or the new collection. Mutations are serialized by
    ``_lock``; reads do not take it.
    """

    def __init__(self, path: str):
        self._path = path
        self._lock = threading.Lock()

    @property
    def path(self) -> str:
        return self._path

    def _read(self) -> tuple[list[LogRecord], int]:
        if not os.path.exists(self._path):
            return [], 0

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Cannot read log store %s: %s", self._path, exc)
            raise StoreUnavailable(f"Log store {self._path} is unreadable: {exc}") from exc

        if isinstance(data, list):
            raw_logs, last_id = data, None
        elif isinstance(data, dict) and isinstance(data.get("logs"), list):
            raw_logs, last_id = data["logs"], data.get("last_id")
        else:
            raise StoreUnavailable(f"Log store {self._path} has an unexpected layout")

        try:
            records = [LogRecord.from_dict(item) for item in raw_logs]
        except (KeyError, TypeError) as exc:
            raise StoreUnavailable(f"Log store {self._path} holds a malformed record: {exc}") from exc

        highest = max((r.id for r in records), default=0)
        if not isinstance(last_id, int) or last_id < highest:
            last_id = highest
        return records, last_id

    def _write(self, records: list[LogRecord], last_id: int) -> None:
        directory = os.path.dirname(os.path.abspath(self._path))
        data = {"last_id": last_id, "logs": [r.to_dict() for r in records]}
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=directory, suffix=".tmp")
        except OSError as exc:
            raise StoreUnavailable(f"Log store {self._path} is unwritable: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self._path)
        except OSError as exc:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise StoreUnavailable(f"Log store {self._path} is unwritable: {exc}") from exc
        logger.debug("Wrote %d record(s) to %s", len(records), self._path)

    def load_all(self) -> list[LogRecord]:
        """Return every persisted record in stored order."""
        records, _ = self._read()
        return records

    def count(self) -> int:
        return len(self.load_all())

    def replace_all(self, records: list[LogRecord]) -> None:
        """Atomically overwrite the collection.

        The id counter is preserved when the current file is readable. A
        corrupt file is replaced outright, with the counter rebuilt from
        ``records``.
        """
        with self._lock:
            try:
                _, last_id = self._read()
            except StoreUnavailable as exc:
                logger.warning("Overwriting unreadable log store: %s", exc)
                last_id = 0
            highest = max((r.id for r in records), default=0)
            self._write(list(records), max(last_id, highest))

    def append(self, fields: dict) -> LogRecord:
        """Assign the next id to ``fields``, append and persist. Returns the stored record."""
        with self._lock:
            records, last_id = self._read()
            record = LogRecord.from_dict(fields, record_id=last_id + 1)
            records.append(record)
            self._write(records, record.id)
        logger.info("Stored log %d (level=%s, resourceId=%s)", record.id, record.level, record.resource_id)
        return record
