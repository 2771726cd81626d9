"""
Schedule Schemas
================

Pydantic models for the JSON schedule payload published by the schedule
service:

    {"workday": [{"from": "06:00", "to": "08:00", "temperature": 21}],
     "freeday": [...],
     "defaultTemperature": 17}
"""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from thermostat.domain.exceptions import PayloadError
from thermostat.domain.schedule import Schedule, ScheduleCell


class ScheduleCellSchema(BaseModel):
    """One heating window. Times stay as strings and are parsed per tick."""

    from_time: str = Field(..., alias="from", description="Window start HH:MM")
    to_time: str = Field(..., alias="to", description="Window end HH:MM")
    temperature: float = Field(..., description="Target temperature inside the window")

    model_config = ConfigDict(strict=True, populate_by_name=True)

    def to_domain(self) -> ScheduleCell:
        return ScheduleCell(from_time=self.from_time, to_time=self.to_time, temperature=self.temperature)


class SchedulePayloadSchema(BaseModel):
    """Full schedule message."""

    workday: List[ScheduleCellSchema] = Field(default_factory=list)
    freeday: List[ScheduleCellSchema] = Field(default_factory=list)
    default_temperature: float = Field(..., alias="defaultTemperature")

    model_config = ConfigDict(
        strict=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "workday": [{"from": "06:00", "to": "08:00", "temperature": 21.0}],
                "freeday": [],
                "defaultTemperature": 17.0,
            }
        },
    )

    @field_validator("workday", "freeday", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    def to_domain(self) -> Schedule:
        return Schedule(
            workday=tuple(cell.to_domain() for cell in self.workday),
            freeday=tuple(cell.to_domain() for cell in self.freeday),
            default_temperature=self.default_temperature,
        )


def decode_schedule(payload: bytes) -> Schedule:
    """
    Decode a schedule message into a fresh Schedule.

    Raises:
        PayloadError: when the payload is not a valid schedule document
    """
    try:
        return SchedulePayloadSchema.model_validate_json(payload).to_domain()
    except ValidationError as e:
        raise PayloadError(f"invalid schedule: {e.error_count()} error(s): {e}", payload=payload) from None
