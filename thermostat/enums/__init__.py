from thermostat.enums.mode import ThermostatMode

__all__ = ["ThermostatMode"]
