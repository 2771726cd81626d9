"""
Configuration for the thermostat
================================
Runtime settings loaded from environment variables, broker URL parsing, and
the logging setup. Topic mappings live in the YAML file handled by
``thermostat.schemas.topics``.
"""

import os
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import timedelta
from urllib.parse import urlsplit

from thermostat.domain.exceptions import ConfigurationError

_BROKER_SCHEMES = {
    "tcp": ("tcp", False, 1883),
    "mqtt": ("tcp", False, 1883),
    "ssl": ("tcp", True, 8883),
    "tls": ("tcp", True, 8883),
    "mqtts": ("tcp", True, 8883),
    "ws": ("websockets", False, 80),
    "wss": ("websockets", True, 443),
}


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Environment variable {name} must be an integer.") from None


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"Environment variable {name} must be a number.") from None


@dataclass
class AppConfig:
    """Runtime configuration loaded from environment variables."""

    environment: str = field(default_factory=lambda: os.getenv("THERMOSTAT_ENV", "production"))
    DEBUG: bool = field(default_factory=lambda: _env_bool("THERMOSTAT_DEBUG", False))
    log_level: str = field(default_factory=lambda: os.getenv("THERMOSTAT_LOG_LEVEL", "INFO"))
    log_dir: str = field(default_factory=lambda: os.getenv("THERMOSTAT_LOG_DIR", "logs"))
    log_to_file: bool = field(default_factory=lambda: _env_bool("THERMOSTAT_LOG_TO_FILE", True))

    # CLI defaults
    mqtt_broker_url: str = field(default_factory=lambda: os.getenv("THERMOSTAT_MQTT_BROKER", "tcp://127.0.0.1:1883"))
    mqtt_client_id: str = field(default_factory=lambda: os.getenv("THERMOSTAT_MQTT_CLIENT_ID", "thermostat"))
    mqtt_keepalive: int = field(default_factory=lambda: _env_int("THERMOSTAT_MQTT_KEEPALIVE", 60))
    topics_config_path: str = field(default_factory=lambda: os.getenv("THERMOSTAT_CONFIG", "/config.yaml"))

    # Control loop
    tick_seconds: float = field(default_factory=lambda: _env_float("THERMOSTAT_TICK_SECONDS", 1.0))
    schedule_poll_seconds: float = field(default_factory=lambda: _env_float("THERMOSTAT_SCHEDULE_POLL_SECONDS", 15.0))
    override_minutes: int = field(default_factory=lambda: _env_int("THERMOSTAT_OVERRIDE_MINUTES", 60))

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.tick_seconds <= 0:
            raise ConfigurationError("THERMOSTAT_TICK_SECONDS must be positive.")
        if self.schedule_poll_seconds <= 0:
            raise ConfigurationError("THERMOSTAT_SCHEDULE_POLL_SECONDS must be positive.")
        if self.override_minutes <= 0:
            raise ConfigurationError("THERMOSTAT_OVERRIDE_MINUTES must be positive.")
        if self.mqtt_keepalive <= 0:
            raise ConfigurationError("THERMOSTAT_MQTT_KEEPALIVE must be positive.")

    @property
    def override_duration(self) -> timedelta:
        return timedelta(minutes=self.override_minutes)


@dataclass(frozen=True)
class BrokerAddress:
    """Broker endpoint parsed from a URL such as ``tcp://127.0.0.1:1883``."""

    host: str
    port: int
    transport: str = "tcp"
    tls: bool = False
    username: str | None = None
    password: str | None = None

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


def parse_broker_url(url: str) -> BrokerAddress:
    """
    Parse a broker URL.

    Supported schemes: tcp, mqtt, ssl, tls, mqtts, ws, wss.

    Raises:
        ConfigurationError: the URL cannot be used to reach a broker
    """
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise ConfigurationError(f"Invalid broker URL {url!r}: {e}") from None

    scheme = parts.scheme.lower()
    if scheme not in _BROKER_SCHEMES:
        raise ConfigurationError(f"Invalid broker URL {url!r}: unsupported scheme {parts.scheme!r}")
    if not parts.hostname:
        raise ConfigurationError(f"Invalid broker URL {url!r}: missing host")

    transport, tls, default_port = _BROKER_SCHEMES[scheme]
    return BrokerAddress(
        host=parts.hostname,
        port=port or default_port,
        transport=transport,
        tls=tls,
        username=parts.username,
        password=parts.password,
    )


def setup_logging(debug: bool = False, level: str = "INFO", log_dir: str | None = "logs") -> None:
    """Setup logging configuration."""
    import logging
    import sys
    from logging.handlers import RotatingFileHandler

    log_level = logging.DEBUG if debug else logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    # Root logger
    root = logging.getLogger()
    root.setLevel(log_level)

    # Avoid adding duplicate handlers when called more than once
    has_console = any(getattr(h, "name", "") == "thermostat_console" for h in root.handlers)
    has_file = any(getattr(h, "name", "") == "thermostat_file" for h in root.handlers)
    added_handler = False

    stream = sys.stdout
    with suppress(AttributeError, ValueError):
        stream.reconfigure(encoding="utf-8", errors="replace")
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if not has_console:
        console_handler = logging.StreamHandler(stream=stream)
        console_handler.name = "thermostat_console"
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
        added_handler = True

    if log_dir and not has_file:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "thermostat.log"),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.name = "thermostat_file"
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        added_handler = True

    for handler in root.handlers:
        if getattr(handler, "name", "") in {"thermostat_console", "thermostat_file"}:
            handler.setLevel(log_level)

    if added_handler:
        root.info(f"Logging initialized at level: {logging.getLevelName(log_level)}")

    # paho logs every reconnect attempt at INFO
    if _env_bool("THERMOSTAT_SILENCE_PAHO", True):
        logging.getLogger("paho").setLevel(logging.WARNING)


def load_config() -> AppConfig:
    """Helper for callers to load and validate configuration."""
    return AppConfig()
