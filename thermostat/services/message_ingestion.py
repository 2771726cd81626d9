"""
Message Ingestion Service
=========================

Router for the MQTT messages the thermostat listens to.

Each configured topic is bound at startup to one typed handler:
- holiday topic  -> boolean payload  -> holiday flag
- override topic -> float payload    -> override value (window extended first)
- mode topic     -> text payload     -> mode state machine (optional)
- schedule topic -> JSON payload     -> whole-schedule replacement

A malformed payload is logged and dropped; the previous value stays in
place. Nothing here is retried.
"""

from __future__ import annotations

import logging
from typing import Callable

from thermostat.domain.exceptions import ConfigurationError, PayloadError
from thermostat.schemas.schedule import decode_schedule
from thermostat.schemas.topics import TopicConfig
from thermostat.services.setpoint_publisher import ModePublisher
from thermostat.services.state_store import ThermostatState
from thermostat.utils.parsing import decode_text, parse_bool, parse_float
from thermostat.utils.time import local_now

logger = logging.getLogger(__name__)

PayloadHandler = Callable[[bytes], None]


class MessageIngestionService:
    """Decodes inbound payloads into the state store."""

    def __init__(
        self,
        state: ThermostatState,
        topics: TopicConfig,
        mode_publisher: ModePublisher | None = None,
        clock: Callable = local_now,
    ):
        """
        Args:
            state: Store receiving the decoded values
            topics: Topic configuration
            mode_publisher: Publishes mode changes caused by mode commands
            clock: Returns the current instant
        """
        self.state = state
        self.mode_publisher = mode_publisher
        self.clock = clock
        self._handlers: dict[str, PayloadHandler] = {}

        self._register(topics.sensors.holiday.address, self._handle_holiday)
        self._register(topics.sensors.override.address, self._handle_override)
        if topics.sensors.mode is not None and state.mode_enabled:
            self._register(topics.sensors.mode.address, self._handle_mode)
        self._register(topics.schedule_topic, self._handle_schedule)

    def _register(self, topic: str, handler: PayloadHandler) -> None:
        if topic in self._handlers:
            raise ConfigurationError(f"Topic {topic!r} is configured for more than one point")
        self._handlers[topic] = handler

    @property
    def topics(self) -> list[str]:
        return list(self._handlers)

    def bind(self, mqtt_client) -> None:
        """Subscribe every handled topic on the MQTT client."""
        for topic in self._handlers:
            mqtt_client.subscribe(topic, self._on_message)

    def _on_message(self, client, userdata, msg) -> None:
        self.handle(msg.topic, msg.payload)

    def handle(self, topic: str, payload: bytes) -> bool:
        """
        Route one message to its handler.

        Returns:
            True when the message was decoded and applied.
        """
        handler = self._handlers.get(topic)
        if handler is None:
            return False
        try:
            handler(payload)
        except PayloadError as e:
            logger.warning("Received incorrect message payload on %s: %r (%s)", topic, payload, e)
            return False
        return True

    # ==================== Handlers ====================

    def _handle_holiday(self, payload: bytes) -> None:
        value = parse_bool(payload)
        self.state.set_holiday(value)
        if value:
            logger.info("We are in holiday mode!")
        else:
            logger.info("Working days mode activated.")

    def _handle_override(self, payload: bytes) -> None:
        # The window restarts even when the value turns out to be unparseable.
        self.state.extend_override(self.clock())
        value = parse_float(payload)
        self.state.set_override_value(value)
        logger.info("Overriding expected temperature to: %.2f", value)

    def _handle_mode(self, payload: bytes) -> None:
        try:
            raw = decode_text(payload)
        except PayloadError:
            return
        if self.state.command_mode(raw, self.clock()) is not None:
            self._publish_mode()

    def _handle_schedule(self, payload: bytes) -> None:
        schedule = decode_schedule(payload)
        self.state.replace_schedule(schedule)
        logger.info("New schedule received: %s", schedule)

    def _publish_mode(self) -> None:
        if self.mode_publisher is not None:
            self.mode_publisher.publish_latest(self.state.current_mode)
