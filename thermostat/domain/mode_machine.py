"""
Mode State Machine
==================

Two states, ``auto`` and ``heat``. The mode is a published view of whether a
manual override currently forces heating:

- External ``heat`` command: enter heat, extend the override window.
- External ``auto`` command: enter auto, collapse the override window.
- Unknown or repeated commands: ignored.
- Every control tick: override active forces heat, inactive forces auto.
  The window is left as is; only the mode follows it.

Transitions only mutate state. They return the new mode when it changed so
the caller can publish it once it has released any locks it holds.
"""

from __future__ import annotations

import datetime
import logging

from thermostat.domain.override import OverrideWindow
from thermostat.enums.mode import ThermostatMode

logger = logging.getLogger(__name__)


class ModeStateMachine:
    """Holds the current mode and drives the override window on commands."""

    def __init__(self, override: OverrideWindow, initial: ThermostatMode = ThermostatMode.AUTO):
        self.override = override
        self.mode = initial

    def command(self, raw: str, now: datetime.datetime) -> ThermostatMode | None:
        """
        Apply an external mode command.

        Args:
            raw: Command text as received on the mode topic
            now: Current instant

        Returns:
            The new mode, or None when the command was ignored.
        """
        target = ThermostatMode.parse(raw)
        if target is None or target == self.mode:
            return None

        self.mode = target
        if target == ThermostatMode.HEAT:
            expires_at = self.override.extend(now)
            logger.info("Mode set to heat, override active until %s", expires_at.isoformat(timespec="seconds"))
        else:
            self.override.collapse(now)
            logger.info("Mode set to auto, following schedule")
        return target

    def sync(self, now: datetime.datetime) -> ThermostatMode | None:
        """Force the mode to follow the override window. Runs every tick."""
        target = ThermostatMode.HEAT if self.override.is_active(now) else ThermostatMode.AUTO
        if target == self.mode:
            return None

        self.mode = target
        if target == ThermostatMode.HEAT:
            logger.info(
                "Override active until %s, switching mode to heat",
                self.override.expires_at.isoformat(timespec="seconds"),
            )
        else:
            logger.info("Override expired, switching mode to auto")
        return target
