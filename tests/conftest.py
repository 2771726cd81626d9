"""
Shared test fixtures for the thermostat test suite.

Provides:
- A controllable clock
- A recording MQTT client standing in for MQTTClientWrapper
- Topic configurations with and without the mode topic
- Sample schedules

Usage:
    def test_example(clock, recording_client):
        clock.advance(minutes=5)
        assert recording_client.published == []
"""

from __future__ import annotations

import datetime
import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from thermostat.config import AppConfig
from thermostat.domain.schedule import Schedule, ScheduleCell
from thermostat.schemas.topics import TopicConfig

# ---------------------------------------------------------------------------
# Logging: keep test output clean
# ---------------------------------------------------------------------------
logging.getLogger("thermostat").setLevel(logging.WARNING)

HOLIDAY_TOPIC = "home/thermostat/holiday"
OVERRIDE_TOPIC = "home/thermostat/override"
MODE_TOPIC = "home/thermostat/mode"
SCHEDULE_TOPIC = "home/thermostat/schedule"
EXPECTED_TOPIC = "home/heater/expected"

SCHEDULE_JSON = (
    b'{"workday": [{"from": "06:00", "to": "08:00", "temperature": 21}],'
    b' "freeday": [{"from": "09:00", "to": "12:00", "temperature": 22.5}],'
    b' "defaultTemperature": 17}'
)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime.datetime):
        self.now = start

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, **kwargs) -> datetime.datetime:
        self.now = self.now + datetime.timedelta(**kwargs)
        return self.now

    def set(self, hour: int, minute: int = 0, second: int = 0) -> datetime.datetime:
        self.now = self.now.replace(hour=hour, minute=minute, second=second, microsecond=0)
        return self.now


class RecordingClient:
    """MQTT client double recording publishes and subscriptions."""

    def __init__(self, accept: bool = True):
        self.accept = accept
        self.published: list[tuple[str, str, bool]] = []
        self.subscriptions: list[tuple[str, object]] = []
        self.disconnected = False

    def publish(self, topic, payload, qos=0, retain=False):
        if not self.accept:
            return False
        self.published.append((topic, payload, retain))
        return True

    def subscribe(self, topic, callback):
        self.subscriptions.append((topic, callback))

    def disconnect(self):
        self.disconnected = True

    def payloads(self, topic: str) -> list[str]:
        return [payload for t, payload, _ in self.published if t == topic]


def make_topic_config(with_mode: bool = True, expected_value: float | None = None) -> TopicConfig:
    expected = {"address": EXPECTED_TOPIC}
    if expected_value is not None:
        expected["value"] = expected_value
    sensors = {
        "holiday": {"address": HOLIDAY_TOPIC},
        "override": {"address": OVERRIDE_TOPIC},
    }
    if with_mode:
        sensors["mode"] = {"address": MODE_TOPIC}
    return TopicConfig.model_validate(
        {"actuators": {"expected": expected}, "sensors": sensors, "scheduleTopic": SCHEDULE_TOPIC}
    )


@pytest.fixture()
def clock():
    """Clock parked on a Monday at 07:00 local time."""
    return FakeClock(datetime.datetime(2026, 1, 5, 7, 0, 0))


@pytest.fixture()
def recording_client():
    return RecordingClient()


@pytest.fixture()
def topic_config():
    return make_topic_config(with_mode=True)


@pytest.fixture()
def topic_config_without_mode():
    return make_topic_config(with_mode=False)


@pytest.fixture()
def app_config(monkeypatch):
    """AppConfig with environment overrides cleared."""
    for name in (
        "THERMOSTAT_TICK_SECONDS",
        "THERMOSTAT_SCHEDULE_POLL_SECONDS",
        "THERMOSTAT_OVERRIDE_MINUTES",
        "THERMOSTAT_MQTT_KEEPALIVE",
    ):
        monkeypatch.delenv(name, raising=False)
    return AppConfig()


@pytest.fixture()
def sample_schedule():
    """Workday 06:00-08:00 at 21, freeday 09:00-12:00 at 22.5, default 17."""
    return Schedule(
        workday=(ScheduleCell("06:00", "08:00", 21.0),),
        freeday=(ScheduleCell("09:00", "12:00", 22.5),),
        default_temperature=17.0,
    )


@pytest.fixture()
def make_topics():
    """Factory for TopicConfig variants: make_topics(with_mode=False, expected_value=20.0)."""
    return make_topic_config


@pytest.fixture()
def schedule_json():
    """Raw schedule message matching ``sample_schedule``."""
    return SCHEDULE_JSON


@pytest.fixture()
def make_client_refusing():
    """RecordingClient whose publishes fail until ``accept`` is set."""
    return RecordingClient(accept=False)
