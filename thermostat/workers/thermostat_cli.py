from __future__ import annotations

import argparse
import logging
import signal

from thermostat.config import load_config, parse_broker_url, setup_logging
from thermostat.domain.exceptions import BrokerConnectionError, ConfigurationError, ThermostatError
from thermostat.hardware.mqtt.mqtt_broker_wrapper import MQTTClientWrapper
from thermostat.schemas.topics import load_topic_config
from thermostat.services.container import ServiceContainer

logger = logging.getLogger(__name__)


def build_parser(defaults) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="thermostat", description="Schedule-driven MQTT thermostat")
    parser.add_argument(
        "-broker",
        "--broker",
        default=defaults.mqtt_broker_url,
        help="The full url of the MQTT server to connect to ex: tcp://127.0.0.1:1883",
    )
    parser.add_argument(
        "-clientid",
        "--clientid",
        default=defaults.mqtt_client_id,
        help="A clientid for the connection",
    )
    parser.add_argument(
        "-config",
        "--config",
        default=defaults.topics_config_path,
        help="Provide configuration file with MQTT topic mappings",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the thermostat until interrupted."""
    try:
        config = load_config()
    except ConfigurationError as e:
        logging.basicConfig()
        logger.critical("Invalid environment configuration: %s", e)
        return 1

    args = build_parser(config).parse_args(argv)
    setup_logging(
        debug=args.debug or config.DEBUG,
        level=config.log_level,
        log_dir=config.log_dir if config.log_to_file else None,
    )

    try:
        broker = parse_broker_url(args.broker)
        topics = load_topic_config(args.config)
    except ConfigurationError as e:
        logger.critical("%s", e)
        return 1

    logger.info("Starting (%s) with following config: %s", config.environment, topics.model_dump(by_alias=True))

    mqtt_client = MQTTClientWrapper(
        broker,
        client_id=args.clientid,
        keepalive=config.mqtt_keepalive,
        log_dir=config.log_dir if config.log_to_file else None,
    )
    try:
        container = ServiceContainer.build(config, topics, mqtt_client)
        if not mqtt_client.connect():
            raise BrokerConnectionError(f"Could not connect to MQTT broker {broker}")
    except ThermostatError as e:
        logger.critical("%s", e)
        return 1
    logger.info("Connected to %s as %s and waiting for messages", args.broker, args.clientid)

    signal.signal(signal.SIGTERM, lambda *_: container.controller.stop())
    container.controller.announce_mode()
    try:
        container.controller.run()
    except KeyboardInterrupt:
        logger.info("Stopping thermostat...")
    finally:
        container.shutdown()
    return 0


if __name__ == "__main__":
    import sys

    raise SystemExit(main(sys.argv[1:]))
