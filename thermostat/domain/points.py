"""
Point value objects.

A point pairs the last known value of a sensor or actuator with the MQTT
topic it lives on. Points are frozen: the address is fixed at construction
and value updates produce a new point via :meth:`with_value`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from thermostat.enums.mode import ThermostatMode


@dataclass(frozen=True)
class TemperaturePoint:
    """Temperature reading or setpoint bound to a topic."""

    address: str
    value: float = 0.0

    def with_value(self, value: float) -> "TemperaturePoint":
        return replace(self, value=value)


@dataclass(frozen=True)
class BooleanFlag:
    """Boolean sensor (e.g. holiday) bound to a topic."""

    address: str
    value: bool = False

    def with_value(self, value: bool) -> "BooleanFlag":
        return replace(self, value=value)


@dataclass(frozen=True)
class ModePoint:
    """Operating mode bound to the mode topic."""

    address: str
    value: ThermostatMode = ThermostatMode.AUTO

    def with_value(self, value: ThermostatMode) -> "ModePoint":
        return replace(self, value=value)
