"""
Schedule Domain Entity
======================

Heating schedule as published by the schedule service:
- Workday and freeday cell lists, selected by the holiday flag
- Default temperature used when no cell covers the current time
- Time-window matcher resolving the active temperature for "now"

Cells keep their times of day as the raw "HH:MM" strings they arrived with.
They are parsed on every resolution so that one malformed cell only disables
itself instead of rejecting the whole schedule.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from thermostat.domain.exceptions import ScheduleError
from thermostat.utils.time import at_time_of_day

logger = logging.getLogger(__name__)

END_OF_DAY = "24:00"


def parse_time_of_day(time_str: str) -> datetime.time:
    """Parse an HH:MM string (24-hour) into a time object."""
    parts = time_str.split(":")
    if len(parts) != 2:
        raise ScheduleError(f"time must be in HH:MM format: {time_str!r}")
    try:
        h, m = int(parts[0]), int(parts[1])
    except ValueError:
        raise ScheduleError(f"time must be in HH:MM format: {time_str!r}") from None
    if not (0 <= h <= 23):
        raise ScheduleError(f"hour must be between 0 and 23: {time_str!r}")
    if not (0 <= m <= 59):
        raise ScheduleError(f"minute must be between 0 and 59: {time_str!r}")
    return datetime.time(h, m)


def instant_on(now: datetime.datetime, time_str: str) -> datetime.datetime:
    """
    Place an HH:MM time of day on the date of ``now``.

    ``24:00`` is the midnight that ends the day, so a window may run to the
    end of the day.
    """
    if time_str == END_OF_DAY:
        return at_time_of_day(now, datetime.time(0)) + datetime.timedelta(days=1)
    return at_time_of_day(now, parse_time_of_day(time_str))


@dataclass(frozen=True)
class ScheduleCell:
    """
    One heating window of a day.

    Attributes:
        from_time: Window start, "HH:MM"
        to_time: Window end, "HH:MM"
        temperature: Target temperature inside the window
    """

    from_time: str
    to_time: str
    temperature: float

    def window(self, now: datetime.datetime) -> tuple[datetime.datetime, datetime.datetime]:
        """Return the (start, end) instants of this cell on the day of ``now``."""
        start = instant_on(now, self.from_time)
        end = instant_on(now, self.to_time)
        return start, end

    def matches(self, now: datetime.datetime) -> bool:
        """True when ``now`` lies strictly inside the window."""
        start, end = self.window(now)
        return start < now < end


@dataclass(frozen=True)
class Schedule:
    """
    Complete heating schedule.

    Replaced as a whole whenever a new schedule message is accepted.
    """

    workday: tuple[ScheduleCell, ...] = field(default_factory=tuple)
    freeday: tuple[ScheduleCell, ...] = field(default_factory=tuple)
    default_temperature: float = 0.0

    def cells_for(self, holiday: bool) -> tuple[ScheduleCell, ...]:
        """Select the freeday cells on holidays, the workday cells otherwise."""
        return self.freeday if holiday else self.workday

    def target_for(self, now: datetime.datetime, holiday: bool) -> float:
        return resolve(self.cells_for(holiday), self.default_temperature, now)


def resolve(cells: Iterable[ScheduleCell], default_temperature: float, now: datetime.datetime) -> float:
    """
    Resolve the active temperature at ``now``.

    Every cell is checked; when several match, the last one in iteration
    order wins. Both window boundaries are exclusive. A cell whose end lies
    before its start (spanning midnight) never matches.

    Args:
        cells: Ordered schedule cells
        default_temperature: Result when no cell matches
        now: Instant to resolve for

    Returns:
        The resolved temperature
    """
    result = default_temperature
    for cell in cells:
        try:
            matched = cell.matches(now)
        except ScheduleError as e:
            logger.warning("Skipping schedule cell %s: %s", cell, e)
            continue
        if matched:
            result = cell.temperature
    return result
