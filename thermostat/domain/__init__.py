"""
Domain layer: schedule matching, override timer and mode state machine.

Pure state and rules with no MQTT or threading dependencies.
"""

from thermostat.domain.exceptions import (
    BrokerConnectionError,
    ConfigurationError,
    PayloadError,
    ScheduleError,
    ThermostatError,
)
from thermostat.domain.mode_machine import ModeStateMachine
from thermostat.domain.override import OVERRIDE_DURATION, OverrideWindow
from thermostat.domain.points import BooleanFlag, ModePoint, TemperaturePoint
from thermostat.domain.schedule import Schedule, ScheduleCell, parse_time_of_day, resolve

__all__ = [
    "OVERRIDE_DURATION",
    "BooleanFlag",
    "BrokerConnectionError",
    "ConfigurationError",
    "ModePoint",
    "ModeStateMachine",
    "OverrideWindow",
    "PayloadError",
    "Schedule",
    "ScheduleCell",
    "ScheduleError",
    "TemperaturePoint",
    "ThermostatError",
    "parse_time_of_day",
    "resolve",
]
