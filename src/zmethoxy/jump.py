"""Actions behind the z-methoxy command line.

Each action returns the text meant for the calling shell function; the
command line prints it. Everything else goes to the log.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterable, Sequence
from pathlib import Path

from zmethoxy.utils.history import HistoryRecord, HistoryStore
from zmethoxy.utils.history_file import HistoryFile, split_fields

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 60 * 60 * 24


def current_time() -> int:
    return int(time.time())


def current_dir() -> str:
    try:
        return os.getcwd()
    except OSError as e:
        logger.warning("Cannot determine current directory: %s", e)
        return str(Path.home())


def visit(tokens: Sequence[str], history_file: HistoryFile, now: int | None = None) -> str:
    """Resolve what the user typed to a directory, recording the visit.

    An existing directory is recorded and returned as typed. An absolute path
    that does not exist is returned unchanged. Anything else is looked up in
    the history, falling back to the current directory.
    """
    now = current_time() if now is None else now
    raw_dir = tokens[0] if tokens else ""
    store = history_file.load()

    if raw_dir and os.path.isdir(raw_dir):
        try:
            canonical = str(Path(raw_dir).resolve(strict=True))
        except OSError as e:
            logger.warning("Cannot canonicalize %s: %s", raw_dir, e)
            return raw_dir
        store.insert_or_touch(canonical, now)
        history_file.save(store)
        return raw_dir

    if os.path.isabs(raw_dir):
        return raw_dir

    logger.info("Not found in the file system: %s - use the history to find a match", raw_dir)
    return find_in_history(store, tokens, history_file, now)


def find_in_history(
    store: HistoryStore,
    tokens: Sequence[str],
    history_file: HistoryFile,
    now: int,
) -> str:
    """Jump to the best history match for ``tokens``, or stay put."""
    logger.debug("dir_set: %s", list(tokens))
    best = store.best_match(tokens, now)
    if best is None or best[1] < 0:
        logger.debug("no usable match, staying in the current directory")
        return current_dir()

    record, best_score = best
    logger.debug("best_item: %s (score %d)", record.directory_path, best_score)
    store.touch_matching(record.directory_path, now)
    history_file.save(store)
    return record.directory_path


def visit_previous(history_file: HistoryFile, now: int | None = None) -> str:
    """Jump back to $OLD_DIR."""
    old_dir = os.environ.get("OLD_DIR")
    if old_dir is None:
        logger.warning("OLD_DIR is not set")
        old_dir = ""
    logger.debug("OLD_DIR: %s", old_dir)
    return visit([old_dir], history_file, now=now)


def finish_pick(chosen: str | None, history_file: HistoryFile, now: int | None = None) -> str:
    """Count a directory chosen in the picker as a visit.

    A cancelled pick leaves the history alone and stays in the current directory.
    """
    if chosen is None:
        return current_dir()
    now = current_time() if now is None else now
    store = history_file.load()
    store.insert_or_touch(chosen, now)
    history_file.save(store)
    return chosen


def format_records(records: Iterable[HistoryRecord], now: int | None = None) -> list[str]:
    """Render records as ``<days> <count> <path>`` lines."""
    now = current_time() if now is None else now
    lines = []
    for record in records:
        elapsed = now - record.last_used
        if elapsed < 0:
            logger.warning("Failure in print_history: %s was last used in the future", record.directory_path)
            continue
        lines.append(f"{elapsed // SECONDS_PER_DAY:>4} {record.times_used:>3} {record.directory_path}")
    return lines


def history_lines(history_file: HistoryFile, now: int | None = None) -> list[str]:
    return format_records(history_file.load(), now=now)


def match_lines(tokens: Sequence[str], history_file: HistoryFile, now: int | None = None) -> list[str]:
    return format_records(history_file.load().resolve_all(tokens), now=now)


def cut(lines: Iterable[str]) -> Iterable[str]:
    """Strip the leading two columns from each listing line.

    Lets a fuzzy picker show ``--print-history`` output while the shell gets
    just the path back.
    """
    for line in lines:
        fields = split_fields(line)
        if fields is None:
            logger.warning("Invalid line format: %r", line.rstrip("\n"))
            continue
        yield fields[2]
