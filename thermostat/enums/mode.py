"""
Thermostat Mode Enumerations
============================

Operating modes published on the mode topic.
"""

from enum import Enum


class ThermostatMode(str, Enum):
    """
    Operating mode of the thermostat.

    - AUTO: target follows the workday/freeday schedule
    - HEAT: target follows the manual override value
    """

    AUTO = "auto"
    HEAT = "heat"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: str) -> "ThermostatMode | None":
        """Return the mode named by ``raw``, or None for anything else."""
        try:
            return cls(raw)
        except ValueError:
            return None
