"""
Manual override timer.

A manual override forces the override temperature for a fixed window after
the last override message (or heat command). The window is plain state; it
has no thread of its own and is driven by ingestion and the control loop.

The window starts out never opened, so stepping the wall clock backwards
cannot turn on an override nobody asked for. Once opened it only counts
as active between its start and its expiry: a backward clock step ends it
early instead of stretching it.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Optional

OVERRIDE_DURATION = datetime.timedelta(minutes=60)


def is_active(now: datetime.datetime, expires_at: datetime.datetime) -> bool:
    """True while ``now`` is before the expiry instant."""
    return now < expires_at


def extend(now: datetime.datetime, duration: datetime.timedelta = OVERRIDE_DURATION) -> datetime.datetime:
    """Return the new expiry instant for an override started at ``now``."""
    return now + duration


@dataclass
class OverrideWindow:
    """Start and expiry instants of the current manual override."""

    expires_at: Optional[datetime.datetime] = None
    started_at: Optional[datetime.datetime] = None
    duration: datetime.timedelta = OVERRIDE_DURATION

    @classmethod
    def inactive(cls, duration: datetime.timedelta = OVERRIDE_DURATION) -> "OverrideWindow":
        """A window that has never been opened."""
        return cls(duration=duration)

    @property
    def opened(self) -> bool:
        return self.started_at is not None and self.expires_at is not None

    def is_active(self, now: datetime.datetime) -> bool:
        if not self.opened:
            return False
        return self.started_at <= now and is_active(now, self.expires_at)

    def extend(self, now: datetime.datetime) -> datetime.datetime:
        self.started_at = now
        self.expires_at = extend(now, self.duration)
        return self.expires_at

    def collapse(self, now: datetime.datetime) -> datetime.datetime:
        """End the override immediately."""
        self.expires_at = now
        return self.expires_at
