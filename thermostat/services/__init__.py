from thermostat.services.message_ingestion import MessageIngestionService
from thermostat.services.setpoint_publisher import ModePublisher, SetpointPublisher
from thermostat.services.state_store import StateSnapshot, ThermostatState

__all__ = [
    "MessageIngestionService",
    "ModePublisher",
    "SetpointPublisher",
    "StateSnapshot",
    "ThermostatState",
]
