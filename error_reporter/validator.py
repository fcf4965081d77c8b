"""Error report validation against a JSON schema."""

import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Optional, Union

import jsonschema

from error_reporter.models import ErrorReport

# Fields in the order their failures are reported.
FIELD_ORDER = ("errorMessage", "url", "line", "column", "errorStack")

REPORT_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["errorMessage", "url", "line", "column"],
    "properties": {
        "errorMessage": {"type": "string", "minLength": 1},
        "url": {"type": "string", "format": "uri"},
        "line": {"type": "integer"},
        "column": {"type": "integer"},
        "errorStack": {"type": ["string", "null"]},
    },
}

_TYPE_PHRASES = {
    "string": "a string",
    "integer": "an integer",
    "object": "a JSON object",
    "null": "null",
}


@dataclass(frozen=True)
class ValidationFailure:
    """First failing field of a rejected payload. ``field`` is None for the payload itself."""

    field: Optional[str]
    message: str


class ReportValidator:
    """Validates raw report payloads and decodes them into ErrorReport."""

    def __init__(self):
        self._validator = jsonschema.Draft202012Validator(
            REPORT_SCHEMA,
            format_checker=jsonschema.FormatChecker(),
        )
        self._lock = threading.Lock()
        self._stats = {
            "total": 0,
            "valid": 0,
            "invalid": 0,
            "error_fields": defaultdict(int),
        }

    def validate(self, payload) -> Union[ErrorReport, ValidationFailure]:
        """Return an ErrorReport, or a ValidationFailure for the highest-priority bad field."""
        if not isinstance(payload, dict):
            failure = ValidationFailure(None, '"value" must be a JSON object')
            self._count(failure)
            return failure

        errors = list(self._validator.iter_errors(payload))
        if errors:
            failure = min(
                (_to_failure(error, payload) for error in errors),
                key=_priority,
            )
            self._count(failure)
            return failure

        self._count(None)
        return ErrorReport(
            error_message=payload["errorMessage"],
            url=payload["url"],
            line=int(payload["line"]),
            column=int(payload["column"]),
            error_stack=payload.get("errorStack"),
        )

    def _count(self, failure: Optional[ValidationFailure]):
        with self._lock:
            self._stats["total"] += 1
            if failure is None:
                self._stats["valid"] += 1
            else:
                self._stats["invalid"] += 1
                self._stats["error_fields"][failure.field or "payload"] += 1

    def get_stats(self):
        """Return a copy of the stats dict."""
        with self._lock:
            stats = dict(self._stats)
            stats["error_fields"] = dict(stats["error_fields"])
            return stats


def _priority(failure: ValidationFailure) -> int:
    if failure.field in FIELD_ORDER:
        return FIELD_ORDER.index(failure.field)
    return len(FIELD_ORDER)


def _to_failure(error: jsonschema.ValidationError, payload: dict) -> ValidationFailure:
    if error.validator == "required":
        missing = [name for name in FIELD_ORDER
                   if name in error.validator_value and name not in payload]
        field = missing[0] if missing else None
        return ValidationFailure(field, f'"{field}" is required')

    field = error.absolute_path[0] if error.absolute_path else None
    return ValidationFailure(field, _describe(field, error))


def _describe(field: Optional[str], error: jsonschema.ValidationError) -> str:
    name = field or "value"
    if error.validator == "minLength":
        return f'"{name}" is not allowed to be empty'
    if error.validator == "format":
        return f'"{name}" must be a valid {error.validator_value}'
    if error.validator == "type":
        expected = error.validator_value
        if isinstance(expected, str):
            expected = [expected]
        phrase = " or ".join(_TYPE_PHRASES.get(t, t) for t in expected)
        return f'"{name}" must be {phrase}'
    return f'"{name}" {error.message}'
