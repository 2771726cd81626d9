import datetime

from thermostat.config import AppConfig
from thermostat.services.container import ServiceContainer


def test_build_wires_mode_services(app_config, topic_config, recording_client, clock):
    container = ServiceContainer.build(app_config, topic_config, recording_client, clock=clock)

    assert container.state.mode_enabled
    assert container.mode_publisher is not None
    assert container.controller.mode_publisher is container.mode_publisher
    assert [topic for topic, _ in recording_client.subscriptions] == topic_config.subscriptions()


def test_build_without_mode_topic(app_config, topic_config_without_mode, recording_client, clock):
    container = ServiceContainer.build(app_config, topic_config_without_mode, recording_client, clock=clock)

    assert not container.state.mode_enabled
    assert container.mode_publisher is None
    assert len(recording_client.subscriptions) == 3


def test_seeded_expected_value(app_config, make_topics, recording_client, clock):
    container = ServiceContainer.build(app_config, make_topics(expected_value=19.0), recording_client, clock=clock)

    assert container.setpoint_publisher.last_published == 19.0


def test_override_duration_comes_from_config(monkeypatch, topic_config, recording_client, clock):
    monkeypatch.setenv("THERMOSTAT_OVERRIDE_MINUTES", "15")
    container = ServiceContainer.build(AppConfig(), topic_config, recording_client, clock=clock)
    container.ingestion.handle(topic_config.sensors.override.address, b"23")

    assert container.state.snapshot(clock()).override_expires_at == clock() + datetime.timedelta(minutes=15)


def test_shutdown_stops_controller_and_disconnects(app_config, topic_config, recording_client, clock):
    container = ServiceContainer.build(app_config, topic_config, recording_client, clock=clock)
    container.shutdown()

    assert container.controller.stop_event.is_set()
    assert recording_client.disconnected
