"""In-memory directory history with frecency lookups."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from zmethoxy.utils.matching import matches
from zmethoxy.utils.scoring import EXACT_MATCH_MULTIPLIER, score

logger = logging.getLogger(__name__)


@dataclass
class HistoryRecord:
    directory_path: str
    last_used: int
    times_used: int = 1

    def touch(self, now: int) -> None:
        """Count one more visit at ``now``."""
        self.times_used += 1
        self.last_used = max(self.last_used, now)


class HistoryStore:
    """Visited directories, kept sorted by path."""

    def __init__(self, records: Sequence[HistoryRecord] = ()) -> None:
        self._records: list[HistoryRecord] = []
        for record in records:
            self.merge(record)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[HistoryRecord]:
        return iter(self._records)

    @property
    def records(self) -> list[HistoryRecord]:
        return list(self._records)

    def get(self, path: str) -> HistoryRecord | None:
        index = self._index_of(path)
        return None if index is None else self._records[index]

    def _index_of(self, path: str) -> int | None:
        for i, record in enumerate(self._records):
            if record.directory_path == path:
                return i
        return None

    def _sort(self) -> None:
        self._records.sort(key=lambda r: r.directory_path)

    # --- Mutation ---

    def insert_or_touch(self, path: str, now: int) -> HistoryRecord:
        """Record a visit to ``path``, creating the record on first visit."""
        index = self._index_of(path)
        if index is not None:
            record = self._records[index]
            record.touch(now)
            return record
        record = HistoryRecord(directory_path=path, last_used=now, times_used=1)
        self._records.append(record)
        self._sort()
        return record

    def touch_matching(self, target_path: str, now: int) -> None:
        """Count a visit to every record for ``target_path``."""
        for i, record in enumerate(self._records):
            if record.directory_path == target_path:
                self._records[i].touch(now)

    def merge(self, record: HistoryRecord) -> None:
        """Add a record read from disk, folding duplicate paths together."""
        index = self._index_of(record.directory_path)
        if index is None:
            self._records.append(record)
            self._sort()
            return
        existing = self._records[index]
        logger.debug("duplicate history entry for %s", record.directory_path)
        existing.last_used = max(existing.last_used, record.last_used)
        existing.times_used += record.times_used

    # --- Queries ---

    def _scored(self, user_tokens: Sequence[str], now: int) -> Iterator[tuple[int, HistoryRecord]]:
        for record in self._records:
            ordered, exact = matches(record.directory_path, user_tokens)
            if not ordered:
                continue
            s = score(record, now)
            if exact:
                s *= EXACT_MATCH_MULTIPLIER
            yield s, record

    def best_match(self, user_tokens: Sequence[str], now: int) -> tuple[HistoryRecord, int] | None:
        """Return the highest-scoring matching record and its score.

        Ties go to the record that sorts first by path. The score may be
        negative when every candidate was unscoreable.
        """
        best: tuple[HistoryRecord, int] | None = None
        for s, record in self._scored(user_tokens, now):
            if best is None or s > best[1]:
                best = (record, s)
        return best

    def resolve_best(self, user_tokens: Sequence[str], now: int) -> HistoryRecord | None:
        best = self.best_match(user_tokens, now)
        return None if best is None else best[0]

    def resolve_all(self, user_tokens: Sequence[str]) -> list[HistoryRecord]:
        """Every record matching ``user_tokens``, sorted by path."""
        found = [r for r in self._records if matches(r.directory_path, user_tokens)[0]]
        return sorted(found, key=lambda r: r.directory_path)

    def ranked(self, user_tokens: Sequence[str], now: int) -> list[tuple[HistoryRecord, int]]:
        """Matching records with scores, best first."""
        scored = [(record, s) for s, record in self._scored(user_tokens, now)]
        # sorted() is stable, so equal scores stay in path order
        return sorted(scored, key=lambda pair: pair[1], reverse=True)
