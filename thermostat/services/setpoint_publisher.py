"""
Setpoint and mode publishers.

SetpointPublisher is the only writer of the actuator topic. It suppresses
duplicate values and publishes retained, so an actuator that restarts gets
the last setpoint from the broker straight away.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol

from thermostat.domain.points import ModePoint, TemperaturePoint
from thermostat.enums.mode import ThermostatMode

logger = logging.getLogger(__name__)


class Publisher(Protocol):
    def publish(self, topic: str, payload: str, qos: int = 0, retain: bool = False) -> bool: ...


class SetpointPublisher:
    """Idempotent publisher for the expected temperature."""

    def __init__(self, mqtt_client: Publisher, point: TemperaturePoint, last_published: float | None = None):
        """
        Args:
            mqtt_client: Anything exposing ``publish(topic, payload, qos, retain)``
            point: Actuator point (topic of the expected temperature)
            last_published: Value assumed to be on the topic already, None if unknown
        """
        self.mqtt_client = mqtt_client
        self._point = point
        self._last_published = last_published

    @property
    def point(self) -> TemperaturePoint:
        return self._point

    @property
    def last_published(self) -> float | None:
        return self._last_published

    def set_expected(self, value: float) -> bool:
        """
        Publish ``value`` unless it is already the last published setpoint.

        Returns:
            True when a message was published.
        """
        if self._last_published is not None and self._last_published == value:
            return False

        payload = f"{value:.2f}"
        if not self.mqtt_client.publish(self._point.address, payload, qos=0, retain=True):
            logger.warning("Could not publish expected temperature %s, will retry next tick", payload)
            return False

        self._last_published = value
        self._point = self._point.with_value(value)
        logger.info("Setting expected temperature to %s", payload)
        return True


class ModePublisher:
    """Publishes mode changes (not retained) on the mode topic.

    Ingestion and the control loop both change the mode, each on its own
    thread. They publish through :meth:`publish_latest`, which re-reads the
    mode under a publish lock, so the topic always ends on the mode the
    store holds even when the two publishes race.
    """

    def __init__(self, mqtt_client: Publisher, point: ModePoint):
        self.mqtt_client = mqtt_client
        self.point = point
        self._lock = threading.Lock()
        self._published: ThermostatMode | None = None

    def publish(self, mode: ThermostatMode) -> bool:
        """Publish ``mode`` unconditionally."""
        with self._lock:
            return self._send(mode)

    def publish_latest(self, current: Callable[[], ThermostatMode | None]) -> bool:
        """
        Publish the mode returned by ``current`` unless it was the last one sent.

        Returns:
            True when a message was published.
        """
        with self._lock:
            mode = current()
            if mode is None or mode == self._published:
                return False
            return self._send(mode)

    def _send(self, mode: ThermostatMode) -> bool:
        published = self.mqtt_client.publish(self.point.address, str(mode), qos=0, retain=False)
        if published:
            self._published = mode
            logger.info("Published mode %s to %s", mode, self.point.address)
        else:
            logger.warning("Could not publish mode %s to %s", mode, self.point.address)
        return published
