from thermostat.schemas.schedule import ScheduleCellSchema, SchedulePayloadSchema, decode_schedule
from thermostat.schemas.topics import (
    ActuatorsConfig,
    BoolPointConfig,
    DataPointConfig,
    ModePointConfig,
    SensorsConfig,
    TopicConfig,
    load_topic_config,
)

__all__ = [
    "ActuatorsConfig",
    "BoolPointConfig",
    "DataPointConfig",
    "ModePointConfig",
    "ScheduleCellSchema",
    "SchedulePayloadSchema",
    "SensorsConfig",
    "TopicConfig",
    "decode_schedule",
    "load_topic_config",
]
