"""Schedule-driven MQTT thermostat decision engine."""

__version__ = "1.0.0"
