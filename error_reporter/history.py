"""Tolerant replay of the append-only record store."""

import contextlib
import json
import logging

from error_reporter.models import HistoryEntry, LogRecord, RawFallback

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("timestamp", "level", "message")


class StoreReadError(Exception):
    """The store as a whole could not be read."""


def decode_line(line: str) -> HistoryEntry:
    """Decode one stored line; anything that is not a record comes back as RawFallback."""
    try:
        data = json.loads(line)
    except ValueError:
        return RawFallback(line)
    if not isinstance(data, dict) or any(key not in data for key in REQUIRED_KEYS):
        return RawFallback(line)
    return LogRecord.from_dict(data)


class HistoryReader:
    """Reads every record in the store, in append order."""

    def __init__(self, path: str, lock=None):
        self.path = path
        self._lock = lock if lock is not None else contextlib.nullcontext()

    def read_all(self) -> list[HistoryEntry]:
        try:
            with self._lock, open(self.path, "rb") as f:
                content = f.read()
        except OSError as e:
            raise StoreReadError(f"Could not read {self.path}: {e}") from e

        entries = []
        for raw_line in content.split(b"\n"):
            line = raw_line.decode("utf-8", errors="replace").rstrip("\r")
            if not line.strip():
                continue
            entry = decode_line(line)
            if isinstance(entry, RawFallback):
                logger.debug("Undecodable record kept as raw text: %.80s", line)
            entries.append(entry)
        return entries
