"""Append-only JSON-lines record store with serialized writers."""

import dataclasses
import json
import logging
import os
import threading
from datetime import datetime, timezone

from error_reporter.models import LogRecord, utc_timestamp

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = b"\n"


class PersistenceError(Exception):
    """A record could not be appended; the file holds no partial line for it."""


def encode_record(record: LogRecord) -> bytes:
    """One self-contained line. ensure_ascii keeps embedded newlines escaped."""
    return json.dumps(record.to_dict(), ensure_ascii=True).encode("utf-8") + RECORD_SEPARATOR


class AppendLogStore:
    """Append-only file writer; one JSON record per line, one writer at a time."""

    def __init__(self, path: str, fsync: bool = False, time_func=None):
        self.path = path
        self._fsync = fsync
        self._time_func = time_func or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._appended = 0

        log_dir = os.path.dirname(path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Touch so that a fresh store reads back as empty history.
        with open(path, "ab"):
            pass

    def append(self, record: LogRecord) -> LogRecord:
        """Stamp and write record. Returns the stamped record or raises PersistenceError."""
        with self._lock:
            stamped = dataclasses.replace(record, timestamp=utc_timestamp(self._time_func()))
            self._write_line(encode_record(stamped))
            self._appended += 1
        return stamped

    def _write_line(self, line: bytes):
        try:
            f = open(self.path, "ab", buffering=0)
        except OSError as e:
            raise PersistenceError(f"Could not open {self.path}: {e}") from e

        with f:
            start = f.seek(0, os.SEEK_END)
            try:
                view = memoryview(line)
                while view:
                    written = f.write(view)
                    view = view[written:]
                if self._fsync:
                    os.fsync(f.fileno())
            except OSError as e:
                self._rollback(f, start)
                raise PersistenceError(f"Could not append to {self.path}: {e}") from e

    def _rollback(self, f, size: int):
        try:
            f.truncate(size)
        except OSError:
            logger.exception("Could not truncate %s back to %d bytes", self.path, size)

    @property
    def lock(self) -> threading.Lock:
        """Writer lock; readers that hold it never see a half-written line."""
        return self._lock

    @property
    def appended_count(self) -> int:
        """Records appended by this process."""
        return self._appended
