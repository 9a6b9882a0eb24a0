import json
import os
from collections import defaultdict

import jsonschema
from jsonschema.exceptions import best_match

from logquery.models import REQUIRED_LOG_FIELDS, parse_instant

DEFAULT_SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schemas", "log_record.json")


def _describe(error) -> str:
    """Turn a jsonschema error into a one-line client message."""
    if error.validator == "additionalProperties":
        known = error.schema.get("properties", {})
        unexpected = [key for key in error.instance if key not in known]
        return f"{unexpected[0]} is not an allowed field."
    field = error.path[0] if error.path else None
    if field is None:
        return f"{error.message}."
    if error.validator == "enum":
        allowed = ", ".join(str(v) for v in error.validator_value)
        return f"{field} must be one of: {allowed}."
    if error.validator == "type":
        return f"{field} must be of type {error.validator_value}."
    return f"{field}: {error.message}."


class LogValidator:
    """Validates incoming log records: presence first, then the JSON schema."""

    def __init__(self, schema_path=DEFAULT_SCHEMA_PATH):
        with open(schema_path, "r") as f:
            schema = json.load(f)

        self._validator = jsonschema.Draft202012Validator(schema)
        self._stats = {
            "total": 0,
            "valid": 0,
            "invalid": 0,
            "error_types": defaultdict(int),
        }

    def _reject(self, error_type, message):
        self._stats["invalid"] += 1
        self._stats["error_types"][error_type] += 1
        return False, message

    def validate(self, log_entry):
        """Validate a log entry, stopping at the first problem.

        Required fields are checked in their declared order so the reported
        field is deterministic.

        Returns:
            tuple: (is_valid: bool, error: str | None)
        """
        self._stats["total"] += 1

        if not isinstance(log_entry, dict):
            return self._reject("type", "Request body must be a JSON object.")

        for field in REQUIRED_LOG_FIELDS:
            if field not in log_entry:
                return self._reject("required", f"{field} is required.")

        error = best_match(self._validator.iter_errors(log_entry))
        if error is not None:
            return self._reject(error.validator, _describe(error))

        try:
            parse_instant(log_entry["timestamp"])
        except ValueError:
            return self._reject("format", "timestamp must be an ISO-8601 date-time.")

        self._stats["valid"] += 1
        return True, None

    def get_stats(self):
        """Return a copy of the stats dict."""
        stats = dict(self._stats)
        stats["error_types"] = dict(stats["error_types"])
        return stats
