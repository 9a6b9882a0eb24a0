"""Error taxonomy shared by the store, the query path and the ingestion path."""


class LogQueryError(Exception):
    """Base error. ``status_code`` is the HTTP status the app responds with."""

    status_code = 500


class ValidationError(LogQueryError):
    """An ingested record failed validation."""

    status_code = 400


class MalformedFilterInput(LogQueryError):
    """A query parameter could not be parsed."""

    status_code = 400


class StoreUnavailable(LogQueryError):
    """The persisted collection could not be read or written."""

    status_code = 500
