from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from thermostat.config import AppConfig
from thermostat.control_loops.thermostat_controller import ThermostatController
from thermostat.schemas.topics import TopicConfig
from thermostat.services.message_ingestion import MessageIngestionService
from thermostat.services.setpoint_publisher import ModePublisher, SetpointPublisher
from thermostat.services.state_store import ThermostatState
from thermostat.utils.time import local_now

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Aggregate the thermostat services around one MQTT client."""

    config: AppConfig
    topics: TopicConfig
    mqtt_client: object
    state: ThermostatState
    setpoint_publisher: SetpointPublisher
    mode_publisher: Optional[ModePublisher]
    ingestion: MessageIngestionService
    controller: ThermostatController

    @classmethod
    def build(
        cls,
        config: AppConfig,
        topics: TopicConfig,
        mqtt_client,
        *,
        clock: Callable = local_now,
    ) -> "ServiceContainer":
        """Construct the services and register the MQTT subscriptions.

        Args:
            config: Runtime configuration
            topics: Validated topic configuration
            mqtt_client: Client exposing ``publish`` and ``subscribe`` (usually MQTTClientWrapper)
            clock: Returns the current instant
        """
        sensors = topics.sensors
        mode_point = sensors.mode.to_point() if sensors.mode is not None else None

        state = ThermostatState(
            holiday=sensors.holiday.to_point(),
            override=sensors.override.to_point(),
            mode=mode_point,
            override_duration=config.override_duration,
        )
        expected = topics.actuators.expected
        setpoint_publisher = SetpointPublisher(mqtt_client, expected.to_point(), last_published=expected.value)
        mode_publisher = ModePublisher(mqtt_client, mode_point) if mode_point is not None else None

        ingestion = MessageIngestionService(state, topics, mode_publisher=mode_publisher, clock=clock)
        ingestion.bind(mqtt_client)

        controller = ThermostatController(
            state,
            setpoint_publisher,
            mode_publisher,
            tick_seconds=config.tick_seconds,
            schedule_poll_seconds=config.schedule_poll_seconds,
            clock=clock,
        )

        logger.info(
            "ServiceContainer built (mode state machine %s, subscriptions: %s)",
            "enabled" if state.mode_enabled else "disabled",
            ingestion.topics,
        )
        return cls(
            config=config,
            topics=topics,
            mqtt_client=mqtt_client,
            state=state,
            setpoint_publisher=setpoint_publisher,
            mode_publisher=mode_publisher,
            ingestion=ingestion,
            controller=controller,
        )

    def shutdown(self) -> None:
        """Stop the control loop and release the MQTT connection."""
        self.controller.stop()
        disconnect = getattr(self.mqtt_client, "disconnect", None)
        if disconnect is not None:
            disconnect()
        logger.info("ServiceContainer shutdown complete.")
