"""Frecency scoring for history records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from zmethoxy.utils.history import HistoryRecord

logger = logging.getLogger(__name__)

# Returned when a record was last used "in the future" (clock skew).
UNSCOREABLE = -1

EXACT_MATCH_MULTIPLIER = 4


def score(record: HistoryRecord, now: int) -> int:
    """Weight a record's use count by how long ago it was last used.

    Same buckets zoxide uses: anything older than a week is quartered, older
    than two days is halved, and use within the last day (and again within
    the last hour) doubles the score.
    """
    elapsed = now - record.last_used
    if elapsed < 0:
        logger.debug("last use of %s is %ds in the future", record.directory_path, -elapsed)
        return UNSCOREABLE

    minutes = elapsed // 60
    hours = minutes // 60
    days = hours // 24
    weeks = days // 7

    v = record.times_used * 1000
    if weeks > 0:
        v //= 4
    elif days > 1:
        v //= 2
    else:
        if hours < 24:
            v *= 2
        if minutes < 60:
            v *= 2
    return v
