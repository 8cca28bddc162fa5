"""Read and write the plain-text history file.

Each line is ``<last_used> <times_used> <path>``, for example::

    1734180000    3 /home/alice/projects/foo

Saves go to a temp file next to the history file which is then renamed over
it, so readers only ever see a complete file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from zmethoxy.utils.config import HISTORY_FILE_NAME, TMP_SUFFIX
from zmethoxy.utils.history import HistoryRecord, HistoryStore

logger = logging.getLogger(__name__)

# Paths are bytes on POSIX; keep undecodable ones intact through a round trip.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def split_fields(line: str) -> tuple[str, str, str] | None:
    """Split a line into (time, count, path), or None with fewer than 3 fields."""
    fields = line.split()
    if len(fields) < 3:
        return None
    return fields[0], fields[1], " ".join(fields[2:])


def _parse_count(field: str, what: str) -> int:
    # int() would also take "+5", "1_000" and non-ASCII digits
    if not (field.isascii() and field.isdecimal()):
        raise ValueError(f"bad {what} {field!r}")
    return int(field)


def parse_line(line: str) -> HistoryRecord:
    """Parse one history line.

    Raises ValueError for a short line or a bad numeric field.
    """
    fields = split_fields(line)
    if fields is None:
        raise ValueError(f"expected 3 fields, got {len(line.split())}")
    time_str, count_str, path = fields
    last_used = _parse_count(time_str, "timestamp")
    times_used = _parse_count(count_str, "use count")
    if times_used < 1:
        raise ValueError(f"use count {times_used} is below 1")
    return HistoryRecord(directory_path=path, last_used=last_used, times_used=times_used)


def format_line(record: HistoryRecord) -> str:
    return f"{record.last_used} {record.times_used:>4} {record.directory_path}\n"


class HistoryFile:
    """The history file inside a state directory."""

    def __init__(self, state_dir: Path) -> None:
        self.state_dir = Path(state_dir)
        self.path = self.state_dir / HISTORY_FILE_NAME
        self.tmp_path = self.state_dir / (HISTORY_FILE_NAME + TMP_SUFFIX)

    def load(self) -> HistoryStore:
        """Read the history. A missing or unreadable file gives an empty store."""
        store = HistoryStore()
        try:
            with open(self.path, encoding=_ENCODING, errors=_ERRORS) as f:
                for lineno, line in enumerate(f, 1):
                    try:
                        record = parse_line(line)
                    except ValueError as e:
                        logger.warning("%s:%d: skipping malformed line: %s", self.path, lineno, e)
                        continue
                    store.merge(record)
        except FileNotFoundError:
            logger.debug("no history at %s yet", self.path)
        except OSError as e:
            logger.warning("Could not read history file %s: %s", self.path, e)
        return store

    def save(self, store: HistoryStore) -> bool:
        """Atomically replace the history file with ``store``.

        Returns False (after logging) if any step fails; the previous file is
        then left untouched.
        """
        try:
            self.state_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Create directory failed %s: %s", self.state_dir, e)
            return False

        try:
            with open(self.tmp_path, "w", encoding=_ENCODING, errors=_ERRORS) as f:
                for record in store:
                    f.write(format_line(record))
                f.flush()
                os.fsync(f.fileno())
            os.replace(self.tmp_path, self.path)
        except OSError as e:
            logger.warning("Failed to write history %s: %s", self.tmp_path, e)
            self._discard_tmp()
            return False
        return True

    def _discard_tmp(self) -> None:
        try:
            self.tmp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug("could not remove %s: %s", self.tmp_path, e)
