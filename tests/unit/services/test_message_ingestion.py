"""
Unit Tests for MessageIngestionService
======================================
Routing of MQTT payloads into the state store.
"""

import datetime
import logging
from unittest.mock import Mock

import pytest

from thermostat.domain.exceptions import ConfigurationError
from thermostat.domain.override import OVERRIDE_DURATION
from thermostat.enums.mode import ThermostatMode
from thermostat.services.message_ingestion import MessageIngestionService
from thermostat.services.setpoint_publisher import ModePublisher
from thermostat.services.state_store import ThermostatState


@pytest.fixture
def state(topic_config):
    sensors = topic_config.sensors
    return ThermostatState(
        holiday=sensors.holiday.to_point(),
        override=sensors.override.to_point(),
        mode=sensors.mode.to_point(),
    )


@pytest.fixture
def ingestion(state, topic_config, clock, recording_client):
    mode_publisher = ModePublisher(recording_client, topic_config.sensors.mode.to_point())
    return MessageIngestionService(state, topic_config, mode_publisher=mode_publisher, clock=clock)


def _make_msg(topic: str, payload: bytes) -> Mock:
    msg = Mock()
    msg.topic = topic
    msg.payload = payload
    return msg


class TestRegistration:
    def test_binds_every_topic(self, ingestion, topic_config, recording_client):
        ingestion.bind(recording_client)
        topics = [topic for topic, _ in recording_client.subscriptions]
        assert topics == topic_config.subscriptions()

    def test_mode_topic_not_bound_without_mode(self, topic_config_without_mode, clock):
        sensors = topic_config_without_mode.sensors
        state = ThermostatState(sensors.holiday.to_point(), sensors.override.to_point())
        service = MessageIngestionService(state, topic_config_without_mode, clock=clock)
        assert len(service.topics) == 3
        assert topic_config_without_mode.schedule_topic in service.topics

    def test_duplicate_topics_are_rejected(self, make_topics, clock):
        topics = make_topics()
        topics.schedule_topic = topics.sensors.holiday.address
        sensors = topics.sensors
        state = ThermostatState(sensors.holiday.to_point(), sensors.override.to_point())
        with pytest.raises(ConfigurationError):
            MessageIngestionService(state, topics, clock=clock)

    def test_unknown_topic_is_ignored(self, ingestion):
        assert ingestion.handle("some/other/topic", b"true") is False

    def test_mqtt_callback_routes_by_topic(self, ingestion, state, topic_config):
        ingestion._on_message(None, None, _make_msg(topic_config.sensors.holiday.address, b"true"))
        assert state.holiday.value is True


class TestHoliday:
    @pytest.mark.parametrize("payload, expected", [(b"true", True), (b"1", True), (b"False", False), (b"0", False)])
    def test_accepts_boolean_tokens(self, ingestion, state, topic_config, payload, expected):
        assert ingestion.handle(topic_config.sensors.holiday.address, payload)
        assert state.holiday.value is expected

    @pytest.mark.parametrize("payload", [b"yes", b"", b" true", b"\xff"])
    def test_invalid_payload_keeps_prior_value(self, ingestion, state, topic_config, payload, caplog):
        topic = topic_config.sensors.holiday.address
        ingestion.handle(topic, b"true")
        with caplog.at_level(logging.WARNING, logger="thermostat.services.message_ingestion"):
            assert ingestion.handle(topic, payload) is False
        assert state.holiday.value is True
        assert "Received incorrect message payload" in caplog.text


class TestOverride:
    def test_sets_value_and_starts_window(self, ingestion, state, topic_config, clock):
        assert ingestion.handle(topic_config.sensors.override.address, b"25")
        snapshot = state.snapshot(clock())
        assert snapshot.override_value == 25.0
        assert snapshot.override_active
        assert snapshot.override_expires_at == clock() + OVERRIDE_DURATION

    @pytest.mark.parametrize("payload", [b"warm", b"", b" 21", b"nan", b"inf", b"1_0"])
    def test_invalid_value_still_extends_window(self, ingestion, state, topic_config, clock, payload):
        topic = topic_config.sensors.override.address
        ingestion.handle(topic, b"22.5")
        clock.advance(minutes=90)

        assert ingestion.handle(topic, payload) is False
        snapshot = state.snapshot(clock())
        assert snapshot.override_value == 22.5
        assert snapshot.override_active
        assert snapshot.override_expires_at == clock() + OVERRIDE_DURATION


class TestMode:
    def test_heat_command_publishes_and_extends(self, ingestion, state, topic_config, clock, recording_client):
        mode_topic = topic_config.sensors.mode.address
        assert ingestion.handle(mode_topic, b"heat")
        assert state.mode.value == ThermostatMode.HEAT
        assert state.snapshot(clock()).override_active
        assert recording_client.published == [(mode_topic, "heat", False)]

    def test_repeated_command_does_not_republish(self, ingestion, topic_config, recording_client):
        mode_topic = topic_config.sensors.mode.address
        ingestion.handle(mode_topic, b"heat")
        ingestion.handle(mode_topic, b"heat")
        assert recording_client.payloads(mode_topic) == ["heat"]

    def test_invalid_command_is_silently_ignored(self, ingestion, state, topic_config, recording_client, caplog):
        with caplog.at_level(logging.DEBUG, logger="thermostat"):
            ingestion.handle(topic_config.sensors.mode.address, b"turbo")
            ingestion.handle(topic_config.sensors.mode.address, b"\xfe\xff")
        assert state.mode.value == ThermostatMode.AUTO
        assert recording_client.published == []
        assert caplog.records == []

    def test_auto_command_collapses_window(self, ingestion, state, topic_config, clock, recording_client):
        mode_topic = topic_config.sensors.mode.address
        ingestion.handle(mode_topic, b"heat")
        clock.advance(minutes=10)
        ingestion.handle(mode_topic, b"auto")
        assert not state.snapshot(clock()).override_active
        assert recording_client.payloads(mode_topic) == ["heat", "auto"]


class TestSchedule:
    def test_valid_schedule_replaces_store(self, ingestion, state, topic_config, sample_schedule, schedule_json):
        assert ingestion.handle(topic_config.schedule_topic, schedule_json)
        assert state.schedule == sample_schedule

    @pytest.mark.parametrize(
        "payload",
        [
            b"not json",
            b'{"workday": [], "freeday": []}',
            b'{"workday": [{"from": "06:00", "temperature": 21}], "defaultTemperature": 17}',
            b'{"workday": "nope", "defaultTemperature": 17}',
            b'{"workday": [], "defaultTemperature": "seventeen"}',
            b"[]",
        ],
    )
    def test_invalid_schedule_keeps_prior_schedule(
        self, ingestion, state, topic_config, sample_schedule, schedule_json, payload
    ):
        ingestion.handle(topic_config.schedule_topic, schedule_json)
        assert ingestion.handle(topic_config.schedule_topic, payload) is False
        assert state.schedule == sample_schedule

    def test_bad_time_of_day_is_accepted_at_decode(self, ingestion, state, topic_config):
        payload = b'{"workday": [{"from": "6am", "to": "08:00", "temperature": 21}], "defaultTemperature": 17}'
        assert ingestion.handle(topic_config.schedule_topic, payload)
        assert state.schedule.workday[0].from_time == "6am"
        assert state.schedule.target_for(datetime.datetime(2026, 1, 5, 7, 0), holiday=False) == 17.0
