"""Centralized exception hierarchy for the thermostat.

All errors raised by the thermostat inherit from :class:`ThermostatError` so
that the CLI can catch a single base class at startup, while ingestion and
the control loop match on the narrower subclasses they recover from.

Hierarchy
---------
::

    ThermostatError (base)
    ├── ConfigurationError     (fatal: broker URL, YAML topics, env settings)
    ├── BrokerConnectionError  (fatal: initial MQTT connect failed)
    ├── PayloadError           (recovered: malformed inbound message)
    └── ScheduleError          (recovered: malformed time-of-day in a cell)
"""

from __future__ import annotations


class ThermostatError(Exception):
    """Base exception for all thermostat errors.

    Parameters
    ----------
    message:
        Human-readable description.
    detail:
        Optional machine-readable context dict attached to the error for
        structured logging.
    """

    def __init__(self, message: str = "", *, detail: dict | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}


class ConfigurationError(ThermostatError):
    """Configuration is missing or invalid."""


class BrokerConnectionError(ThermostatError):
    """Cannot connect to the MQTT broker."""


class PayloadError(ThermostatError):
    """Inbound MQTT payload could not be decoded."""

    def __init__(self, message: str = "", *, payload: bytes | None = None) -> None:
        super().__init__(message, detail={"payload": payload})
        self.payload = payload


class ScheduleError(ThermostatError):
    """Schedule cell carries an unparseable time of day."""
