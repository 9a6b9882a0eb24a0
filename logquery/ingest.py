"""Ingestion: validate a raw record, then hand it to the store for id assignment."""

import logging

from logquery.errors import ValidationError
from logquery.models import LogRecord
from logquery.store import RecordStore
from logquery.validator import LogValidator

logger = logging.getLogger(__name__)


class LogIngestor:
    def __init__(self, store: RecordStore, validator: LogValidator):
        self._store = store
        self._validator = validator

    def ingest(self, log_entry) -> LogRecord:
        """Validate and persist ``log_entry``.

        A client-supplied ``id`` is ignored. Raises ValidationError without
        touching the store when the entry is rejected.
        """
        is_valid, error = self._validator.validate(log_entry)
        if not is_valid:
            logger.info("Rejected log entry: %s", error)
            raise ValidationError(error)

        fields = {k: v for k, v in log_entry.items() if k != "id"}
        return self._store.append(fields)
