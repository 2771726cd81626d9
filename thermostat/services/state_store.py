"""
Thermostat State Store
======================

Single owner of everything the control loop decides from:
- the latest accepted schedule (None until the first one arrives)
- the holiday flag and the override point
- the override window and, when a mode topic is configured, the mode machine

Ingestion runs on paho's network thread while the control loop runs on the
main thread. Every access goes through one lock and the control loop only
ever reads frozen :class:`StateSnapshot` copies, so a schedule swap is seen
either entirely or not at all.
"""

from __future__ import annotations

import datetime
import logging
import threading
from dataclasses import dataclass

from thermostat.domain.mode_machine import ModeStateMachine
from thermostat.domain.override import OVERRIDE_DURATION, OverrideWindow
from thermostat.domain.points import BooleanFlag, ModePoint, TemperaturePoint
from thermostat.domain.schedule import Schedule
from thermostat.enums.mode import ThermostatMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateSnapshot:
    """Consistent view of the store at one instant."""

    schedule: Schedule | None
    holiday: bool
    override_value: float
    override_active: bool
    override_expires_at: datetime.datetime | None
    mode: ThermostatMode | None = None

    @property
    def ready(self) -> bool:
        return self.schedule is not None

    @property
    def heating_forced(self) -> bool:
        """True when the override value, not the schedule, drives the target."""
        if self.mode is None:
            return self.override_active
        return self.mode == ThermostatMode.HEAT


class ThermostatState:
    """Lock-guarded store shared by ingestion and the control loop."""

    def __init__(
        self,
        holiday: BooleanFlag,
        override: TemperaturePoint,
        mode: ModePoint | None = None,
        *,
        override_duration: datetime.timedelta = OVERRIDE_DURATION,
    ):
        """
        Args:
            holiday: Holiday flag point
            override: Override temperature point
            mode: Mode point; None runs without the mode state machine
            override_duration: Length of a manual override
        """
        self._lock = threading.RLock()
        self._schedule: Schedule | None = None
        self._holiday = holiday
        self._override = override
        self._window = OverrideWindow.inactive(override_duration)
        self._mode = mode
        self._mode_machine = ModeStateMachine(self._window, mode.value) if mode is not None else None

    @property
    def mode_enabled(self) -> bool:
        return self._mode_machine is not None

    @property
    def holiday(self) -> BooleanFlag:
        with self._lock:
            return self._holiday

    @property
    def override(self) -> TemperaturePoint:
        with self._lock:
            return self._override

    @property
    def mode(self) -> ModePoint | None:
        with self._lock:
            return self._mode

    def current_mode(self) -> ThermostatMode | None:
        """Mode as last decided, None without a mode topic."""
        with self._lock:
            return self._mode.value if self._mode is not None else None

    @property
    def schedule(self) -> Schedule | None:
        with self._lock:
            return self._schedule

    # ==================== Writers (ingestion) ====================

    def set_holiday(self, value: bool) -> None:
        with self._lock:
            self._holiday = self._holiday.with_value(value)

    def extend_override(self, now: datetime.datetime) -> datetime.datetime:
        """Start or restart the override window at ``now``."""
        with self._lock:
            return self._window.extend(now)

    def set_override_value(self, value: float) -> None:
        with self._lock:
            self._override = self._override.with_value(value)

    def replace_schedule(self, schedule: Schedule) -> None:
        with self._lock:
            self._schedule = schedule

    def command_mode(self, raw: str, now: datetime.datetime) -> ThermostatMode | None:
        """Apply an external mode command. Returns the new mode if it changed."""
        if self._mode_machine is None:
            return None
        with self._lock:
            return self._apply_mode(self._mode_machine.command(raw, now))

    # ==================== Control loop ====================

    def sync_mode(self, now: datetime.datetime) -> ThermostatMode | None:
        """Align the mode with the override window. Returns the new mode if it changed."""
        if self._mode_machine is None:
            return None
        with self._lock:
            return self._apply_mode(self._mode_machine.sync(now))

    def snapshot(self, now: datetime.datetime) -> StateSnapshot:
        with self._lock:
            return StateSnapshot(
                schedule=self._schedule,
                holiday=self._holiday.value,
                override_value=self._override.value,
                override_active=self._window.is_active(now),
                override_expires_at=self._window.expires_at,
                mode=self._mode_machine.mode if self._mode_machine is not None else None,
            )

    def _apply_mode(self, changed: ThermostatMode | None) -> ThermostatMode | None:
        if changed is not None and self._mode is not None:
            self._mode = self._mode.with_value(changed)
        return changed
