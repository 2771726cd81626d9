"""
ThermostatController: fuses the state store into one setpoint per tick.

Each tick:
1. Align the mode with the override window (mode-aware deployments only)
2. Heating forced by an override: target is the override value
3. Otherwise: target comes from the workday or freeday cells
4. Hand the target to the idempotent SetpointPublisher

The loop only starts once a schedule has been received. Until then it polls
and logs, which keeps the actuator untouched rather than guessing a target.
"""

import datetime
import logging
import threading
from typing import Callable

from thermostat.domain.schedule import resolve
from thermostat.services.setpoint_publisher import ModePublisher, SetpointPublisher
from thermostat.services.state_store import StateSnapshot, ThermostatState
from thermostat.utils.time import local_now

logger = logging.getLogger(__name__)


def compute_target(snapshot: StateSnapshot, now: datetime.datetime) -> float:
    """Target temperature for a ready snapshot."""
    if snapshot.heating_forced:
        return snapshot.override_value
    schedule = snapshot.schedule
    return resolve(schedule.cells_for(snapshot.holiday), schedule.default_temperature, now)


class ThermostatController:
    """Periodic control loop for one zone."""

    def __init__(
        self,
        state: ThermostatState,
        setpoint_publisher: SetpointPublisher,
        mode_publisher: ModePublisher | None = None,
        *,
        tick_seconds: float = 1.0,
        schedule_poll_seconds: float = 15.0,
        clock: Callable[[], datetime.datetime] = local_now,
        stop_event: threading.Event | None = None,
    ):
        """
        Args:
            state: Shared state store
            setpoint_publisher: Sole writer of the actuator topic
            mode_publisher: Publishes mode changes made by the tick sync
            tick_seconds: Control period
            schedule_poll_seconds: Wait between readiness checks at startup
            clock: Returns the current instant
            stop_event: Set to stop the loop
        """
        self.state = state
        self.setpoint_publisher = setpoint_publisher
        self.mode_publisher = mode_publisher
        self.tick_seconds = tick_seconds
        self.schedule_poll_seconds = schedule_poll_seconds
        self.clock = clock
        self.stop_event = stop_event or threading.Event()
        self.tick_count = 0
        self.failed_ticks = 0

    def announce_mode(self) -> None:
        """Publish the startup mode so consumers start in sync."""
        mode = self.state.mode
        if mode is not None and self.mode_publisher is not None:
            self.mode_publisher.publish(mode.value)

    def wait_for_schedule(self) -> bool:
        """
        Block until a schedule has been received.

        Returns:
            True once ready, False if stopped while waiting.
        """
        while self.state.schedule is None:
            logger.info("Waiting %ss for schedule data...", f"{self.schedule_poll_seconds:g}")
            if self.stop_event.wait(self.schedule_poll_seconds):
                return False
        logger.info("Starting with schedule received: %s", self.state.schedule)
        return True

    def tick(self, now: datetime.datetime | None = None) -> float | None:
        """
        Run one control step.

        Returns:
            The target temperature, or None when no schedule is available yet.
        """
        now = now or self.clock()

        if self.state.sync_mode(now) is not None and self.mode_publisher is not None:
            self.mode_publisher.publish_latest(self.state.current_mode)

        snapshot = self.state.snapshot(now)
        if not snapshot.ready:
            return None

        target = compute_target(snapshot, now)
        self.setpoint_publisher.set_expected(target)
        self.tick_count += 1
        return target

    def run(self) -> None:
        """Wait for a schedule, then tick until the stop event is set."""
        if not self.wait_for_schedule():
            return
        while not self.stop_event.wait(self.tick_seconds):
            try:
                self.tick()
            except Exception:
                self.failed_ticks += 1
                logger.exception("Control tick failed")
        logger.info("Control loop stopped after %s tick(s)", self.tick_count)

    def stop(self) -> None:
        self.stop_event.set()
