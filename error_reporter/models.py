"""Report and record models shared by the ingestion pipeline."""

import datetime
from dataclasses import dataclass
from typing import Optional, Union

RECORD_LEVEL = "info"


@dataclass(frozen=True)
class ErrorReport:
    error_message: str
    url: str
    line: int
    column: int
    error_stack: Optional[str] = None


@dataclass(frozen=True)
class LogRecord:
    """One persisted report. ``timestamp`` is None until the store stamps it."""

    message: str
    url: str
    line: int
    column: int
    error_stack: Optional[str]
    recommendation: str
    level: str = RECORD_LEVEL
    timestamp: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "level": self.level,
            "message": self.message,
            "errorMessage": self.message,
            "url": self.url,
            "line": self.line,
            "column": self.column,
            "errorStack": self.error_stack,
            "recommendation": self.recommendation,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LogRecord":
        return cls(
            message=data["message"],
            url=data.get("url"),
            line=data.get("line"),
            column=data.get("column"),
            error_stack=data.get("errorStack"),
            recommendation=data.get("recommendation"),
            level=data["level"],
            timestamp=data["timestamp"],
        )


@dataclass(frozen=True)
class RawFallback:
    """A stored line that could not be decoded, kept verbatim."""

    raw: str

    def to_dict(self) -> dict:
        return {"raw": self.raw}


HistoryEntry = Union[LogRecord, RawFallback]


def create_log_record(report: ErrorReport, recommendation: str) -> LogRecord:
    """Factory that turns an accepted report into an unstamped record."""
    return LogRecord(
        message=report.error_message,
        url=report.url,
        line=report.line,
        column=report.column,
        error_stack=report.error_stack,
        recommendation=recommendation,
    )


def utc_timestamp(now: Optional[datetime.datetime] = None) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return now.astimezone(datetime.timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )
