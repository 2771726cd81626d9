"""Utility functions for wall-clock time handling.

Schedules are expressed in local wall-clock times of day, so unlike most
timestamps these helpers work in local time. An aware ``now`` keeps its
tzinfo when combined with a time of day; a naive ``now`` stays naive.
"""

from __future__ import annotations

import datetime


def local_now() -> datetime.datetime:
    """Return the current local time as a naive datetime."""
    return datetime.datetime.now()


def at_time_of_day(now: datetime.datetime, time_of_day: datetime.time) -> datetime.datetime:
    """Combine the date of ``now`` with ``time_of_day``."""
    return datetime.datetime.combine(now.date(), time_of_day, tzinfo=now.tzinfo)

