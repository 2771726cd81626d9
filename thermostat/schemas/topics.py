"""
Topic Configuration Schemas
===========================

Strict pydantic models for the YAML file mapping every point to its MQTT
topic. Unknown keys are rejected.

    actuators:
      expected:
        address: heater/expected
    sensors:
      holiday:
        address: thermostat/holiday
      override:
        address: thermostat/override
      mode:
        address: thermostat/mode
    scheduleTopic: thermostat/schedule
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from thermostat.domain.exceptions import ConfigurationError
from thermostat.domain.points import BooleanFlag, ModePoint, TemperaturePoint
from thermostat.enums.mode import ThermostatMode

logger = logging.getLogger(__name__)

_STRICT = ConfigDict(extra="forbid", populate_by_name=True)


class DataPointConfig(BaseModel):
    """Numeric point. ``value`` seeds the last known value."""

    address: str = Field(..., min_length=1)
    value: Optional[float] = None

    model_config = _STRICT

    def to_point(self) -> TemperaturePoint:
        return TemperaturePoint(address=self.address, value=self.value or 0.0)


class BoolPointConfig(BaseModel):
    address: str = Field(..., min_length=1)
    value: bool = False

    model_config = _STRICT

    def to_point(self) -> BooleanFlag:
        return BooleanFlag(address=self.address, value=self.value)


class ModePointConfig(BaseModel):
    address: str = Field(..., min_length=1)

    model_config = _STRICT

    def to_point(self) -> ModePoint:
        return ModePoint(address=self.address, value=ThermostatMode.AUTO)


class SensorsConfig(BaseModel):
    holiday: BoolPointConfig
    override: DataPointConfig
    mode: Optional[ModePointConfig] = None

    model_config = _STRICT


class ActuatorsConfig(BaseModel):
    expected: DataPointConfig

    model_config = _STRICT


class TopicConfig(BaseModel):
    """Root of the YAML topic configuration."""

    actuators: ActuatorsConfig
    sensors: SensorsConfig
    schedule_topic: str = Field(..., alias="scheduleTopic", min_length=1)

    model_config = _STRICT

    @property
    def mode_enabled(self) -> bool:
        return self.sensors.mode is not None

    def subscriptions(self) -> list[str]:
        """Topics the thermostat listens on."""
        topics = [self.sensors.holiday.address, self.sensors.override.address]
        if self.sensors.mode is not None:
            topics.append(self.sensors.mode.address)
        topics.append(self.schedule_topic)
        return topics


def parse_topic_config(text: str) -> TopicConfig:
    """Parse YAML text into a TopicConfig."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}") from None
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a YAML mapping")
    try:
        return TopicConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid topic configuration: {e}") from None


def load_topic_config(path: str | Path) -> TopicConfig:
    """
    Read and validate the YAML topic configuration.

    Raises:
        ConfigurationError: file missing, unreadable, or invalid
    """
    config_path = Path(path)
    logger.info("Reading configuration from %s", config_path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"File reading error: {e}") from None
    return parse_topic_config(text)
