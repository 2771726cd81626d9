"""
    This module provides a wrapper class for handling MQTT client functionality.
    It includes methods for connecting, disconnecting, publishing, and subscribing
    to an MQTT broker, with appropriate logging for each operation.

    Subscriptions are remembered and replayed whenever paho reconnects, so
    retained schedule and override messages are redelivered after a broker
    restart.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Callable

import paho.mqtt.client as mqtt

from thermostat.config import BrokerAddress
from thermostat.hardware.mqtt.client_factory import create_mqtt_client
from thermostat.utils.time import local_now

_mqtt_logger = logging.getLogger("thermostat.mqtt")

_LOG_MQTT_DISPATCH = os.getenv("THERMOSTAT_LOG_MQTT_DISPATCH", "").lower() in {"1", "true", "t", "yes", "on"}

MessageCallback = Callable[[mqtt.Client, object, mqtt.MQTTMessage], None]


def _configure_mqtt_logger(log_dir: str | None) -> None:
    """Send MQTT traffic logs to their own rotating file."""
    if not log_dir or _mqtt_logger.handlers:
        return
    os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(
        os.path.join(log_dir, "mqtt.log"),
        maxBytes=10 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    _mqtt_logger.addHandler(handler)
    _mqtt_logger.setLevel(logging.INFO)
    _mqtt_logger.propagate = False


@dataclass
class HealthStatus:
    """
    Tracks the health status of the MQTT client connection.
    """

    is_connected: bool = False
    last_error: str | None = None
    last_error_time: datetime | None = None
    connection_attempts: int = 0
    successful_publishes: int = 0
    failed_publishes: int = 0
    active_subscriptions: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate publish success rate percentage"""
        total_publishes = self.successful_publishes + self.failed_publishes
        if total_publishes == 0:
            return 0.0
        return (self.successful_publishes / total_publishes) * 100

    def mark_connected(self):
        self.is_connected = True
        self.last_error = None
        self.last_error_time = None

    def mark_disconnected(self):
        self.is_connected = False

    def record_error(self, error: Exception | str):
        self.last_error = str(error)
        self.last_error_time = local_now()

    def to_dict(self):
        """Return health status as a dictionary."""
        return {
            "is_connected": self.is_connected,
            "last_error": self.last_error,
            "last_error_time": self.last_error_time.isoformat() if self.last_error_time else None,
            "connection_attempts": self.connection_attempts,
            "successful_publishes": self.successful_publishes,
            "failed_publishes": self.failed_publishes,
            "active_subscriptions": self.active_subscriptions,
            "publish_success_rate": round(self.success_rate, 2),
        }


class MQTTClientWrapper:
    """
    Wrapper class for handling MQTT client functionality.
    """

    def __init__(self, broker: BrokerAddress, client_id: str = "", keepalive: int = 60, log_dir: str | None = None):
        """
        Initializes the MQTT client wrapper. Call :meth:`connect` to go online.

        Args:
            broker: Parsed broker address.
            client_id: The MQTT client ID.
            keepalive: Keepalive interval in seconds.
            log_dir: Directory for the rotating MQTT log, None to log via the root logger.
        """
        _configure_mqtt_logger(log_dir)
        self.broker = broker
        self.client_id = client_id
        self.keepalive = keepalive
        self.client = create_mqtt_client(client_id=client_id, transport=broker.transport, tls=broker.tls)
        if broker.username:
            self.client.username_pw_set(broker.username, broker.password)
        self.connected = False
        self._callback_lock = threading.Lock()
        self._callbacks: list[tuple[str, MessageCallback]] = []
        self.client.on_message = self._dispatch_message
        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect
        self.health_status = HealthStatus()

    def connect(self) -> bool:
        """
        Connects to the MQTT broker and starts the network loop thread.

        Returns:
            True when the initial connection succeeded.
        """
        self.health_status.connection_attempts += 1
        try:
            self.client.connect(self.broker.host, self.broker.port, self.keepalive)
        except (OSError, ValueError) as e:
            _mqtt_logger.error("Error connecting to MQTT broker %s: %s", self.broker, e)
            self.connected = False
            self.health_status.record_error(e)
            return False

        self.connected = True
        self.client.loop_start()
        self.health_status.mark_connected()
        _mqtt_logger.info("Connected to MQTT broker %s as %s", self.broker, self.client_id)
        return True

    def disconnect(self):
        """
        Disconnects from the MQTT broker.
        """
        if not self.connected:
            return
        try:
            self.client.disconnect()
            self.client.loop_stop()
        except OSError as e:
            _mqtt_logger.error("Error disconnecting from MQTT broker: %s", e)
            self.health_status.record_error(e)
        self.connected = False
        self.health_status.mark_disconnected()
        _mqtt_logger.info("Disconnected from MQTT broker.")

    def publish(self, topic: str, payload: str, qos: int = 0, retain: bool = False) -> bool:
        """
        Publishes a message to the MQTT broker.

        Args:
            topic: The MQTT topic to publish to.
            payload: The message payload.
            qos: Delivery QoS level.
            retain: Ask the broker to keep the message for new subscribers.

        Returns:
            True when the message was handed to the client.
        """
        if not self.connected:
            _mqtt_logger.warning("MQTT client not connected. Cannot publish to %s.", topic)
            self.health_status.failed_publishes += 1
            return False

        msg_info = self.client.publish(topic, payload, qos=qos, retain=retain)
        if msg_info.rc == mqtt.MQTT_ERR_SUCCESS:
            self.health_status.successful_publishes += 1
            _mqtt_logger.debug("Published to %s: %s (retain=%s)", topic, payload, retain)
            return True

        self.health_status.failed_publishes += 1
        self.health_status.record_error(f"publish rc={msg_info.rc}")
        _mqtt_logger.error("Failed to publish to %s: %s. MQTT result code: %s", topic, payload, msg_info.rc)
        return False

    def subscribe(self, topic: str, callback: MessageCallback) -> None:
        """
        Registers a callback for a topic and subscribes to it.

        The registration is kept even when the client is offline; it is sent
        to the broker on the next (re)connect.

        Args:
            topic: The MQTT topic to subscribe to.
            callback: The callback function to handle messages.
        """
        with self._callback_lock:
            self._callbacks.append((topic, callback))
            self.health_status.active_subscriptions = len(self._callbacks)

        if not self.connected:
            _mqtt_logger.debug("Subscription to %s will be sent on connect", topic)
            return

        result, _mid = self.client.subscribe(topic)
        if result == mqtt.MQTT_ERR_SUCCESS:
            _mqtt_logger.info("Subscribed to topic %s with callback %s", topic, getattr(callback, "__name__", callback))
        else:
            _mqtt_logger.error("Failed to subscribe to topic %s: result code %s", topic, result)

    def _on_connect(self, client, userdata, flags, rc) -> None:
        if rc != 0:
            self.health_status.record_error(f"connect rc={rc}")
            _mqtt_logger.error("MQTT broker refused connection: rc=%s", rc)
            return

        self.health_status.mark_connected()
        with self._callback_lock:
            topics = sorted({topic for topic, _ in self._callbacks})
        for topic in topics:
            client.subscribe(topic)
        if topics:
            _mqtt_logger.info("(Re)subscribed to %s topic(s) after connect", len(topics))

    def _on_disconnect(self, client, userdata, rc) -> None:
        self.health_status.mark_disconnected()
        if rc != 0:
            self.health_status.record_error(f"disconnect rc={rc}")
            _mqtt_logger.warning("Unexpected MQTT disconnect (rc=%s), paho will reconnect", rc)

    def _dispatch_message(self, client, userdata, msg) -> None:
        """
        Fan out MQTT messages to all registered callbacks that match the topic
        using MQTT wildcard semantics.
        """
        if _LOG_MQTT_DISPATCH:
            _mqtt_logger.debug("MQTT DISPATCHER: topic=%s payload_len=%s", msg.topic, len(msg.payload))

        with self._callback_lock:
            callbacks = list(self._callbacks)

        handled = False
        for sub, callback in callbacks:
            if not mqtt.topic_matches_sub(sub, msg.topic):
                continue
            handled = True
            try:
                callback(client, userdata, msg)
            except Exception as e:
                _mqtt_logger.error("Error in MQTT callback for topic %s: %s", sub, e, exc_info=True)

        if not handled:
            _mqtt_logger.warning(
                "MQTT message on %s had no registered handlers (subscriptions: %s)",
                msg.topic,
                [s[0] for s in callbacks],
            )
