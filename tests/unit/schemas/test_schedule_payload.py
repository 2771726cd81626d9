"""Tests for decoding schedule messages."""

import pytest

from thermostat.domain.exceptions import PayloadError
from thermostat.domain.schedule import Schedule, ScheduleCell
from thermostat.schemas.schedule import decode_schedule


def test_decode_full_schedule(schedule_json, sample_schedule):
    assert decode_schedule(schedule_json) == sample_schedule


def test_missing_lists_default_to_empty():
    schedule = decode_schedule(b'{"defaultTemperature": 18.5}')
    assert schedule == Schedule(workday=(), freeday=(), default_temperature=18.5)


def test_null_lists_are_empty():
    schedule = decode_schedule(b'{"workday": null, "freeday": null, "defaultTemperature": 18}')
    assert schedule.workday == ()
    assert schedule.freeday == ()


def test_cell_order_is_kept():
    payload = (
        b'{"workday": [{"from": "06:00", "to": "09:00", "temperature": 20},'
        b' {"from": "07:00", "to": "08:00", "temperature": 22}], "defaultTemperature": 17}'
    )
    schedule = decode_schedule(payload)
    assert schedule.workday == (
        ScheduleCell("06:00", "09:00", 20.0),
        ScheduleCell("07:00", "08:00", 22.0),
    )


@pytest.mark.parametrize(
    "payload",
    [
        b"",
        b"{",
        b'{"workday": []}',
        b'{"workday": [{"from": 6, "to": "08:00", "temperature": 21}], "defaultTemperature": 17}',
        b'{"workday": [{"from": "06:00", "to": "08:00", "temperature": "21"}], "defaultTemperature": 17}',
        b'{"defaultTemperature": null}',
    ],
)
def test_invalid_payloads(payload):
    with pytest.raises(PayloadError) as exc_info:
        decode_schedule(payload)
    assert exc_info.value.payload == payload
