import dataclasses

import pytest

from thermostat.domain.points import BooleanFlag, ModePoint, TemperaturePoint
from thermostat.enums.mode import ThermostatMode


def test_with_value_keeps_address():
    point = TemperaturePoint("heater/expected", 17.0)
    updated = point.with_value(21.0)
    assert updated == TemperaturePoint("heater/expected", 21.0)
    assert point.value == 17.0


def test_address_is_immutable():
    flag = BooleanFlag("home/holiday")
    with pytest.raises(dataclasses.FrozenInstanceError):
        flag.address = "other"


def test_mode_point_defaults_to_auto():
    point = ModePoint("home/mode")
    assert point.value == ThermostatMode.AUTO
    assert str(point.with_value(ThermostatMode.HEAT).value) == "heat"
