from thermostat.hardware.mqtt.client_factory import create_mqtt_client
from thermostat.hardware.mqtt.mqtt_broker_wrapper import HealthStatus, MQTTClientWrapper

__all__ = ["HealthStatus", "MQTTClientWrapper", "create_mqtt_client"]
