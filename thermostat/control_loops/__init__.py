"""
Control Loops Package
=====================

This package contains the control layer of the thermostat:
- Readiness gate waiting for the first schedule
- 1 s tick fusing schedule, holiday flag, override and mode into one setpoint

Architecture:
    MQTT messages
         │
         ▼
    MessageIngestionService ──► ThermostatState
                                      │ snapshot per tick
                                      ▼
                             ThermostatController
                                      │
                                      ▼
                             SetpointPublisher ──► actuator topic
"""

from thermostat.control_loops.thermostat_controller import ThermostatController, compute_target

__all__ = [
    "ThermostatController",
    "compute_target",
]
