# unit conversion and small display helpers are pure, so these tests need no fixtures

import dataclasses
import pytest
from weatherwidget.models import (
    TemperatureUnit,
    WeatherRecord,
    celsius_to_fahrenheit,
    display_temperature,
    icon_url,
)


def test_celsius_to_fahrenheit_reference_points():
    assert celsius_to_fahrenheit(0) == 32.0
    assert celsius_to_fahrenheit(100) == 212.0
    assert celsius_to_fahrenheit(-40) == -40.0


def test_display_temperature_leaves_stored_value_alone():
    record = WeatherRecord("Oslo", 0.0, 80, 2.0)
    unit = TemperatureUnit.CELSIUS
    # toggle back and forth, only the displayed number changes
    for _ in range(3):
        unit = unit.toggled()
        display_temperature(record.temperature_celsius, unit)
    assert record.temperature_celsius == 0.0
    assert display_temperature(record.temperature_celsius, TemperatureUnit.FAHRENHEIT) == 32.0
    assert display_temperature(record.temperature_celsius, TemperatureUnit.CELSIUS) == 0.0


def test_record_is_immutable():
    record = WeatherRecord("Oslo", 1.5, 80, 2.0, "fog", "50d")
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.temperature_celsius = 3.0


@pytest.mark.parametrize("text, expected", [
    ("C", TemperatureUnit.CELSIUS),
    (" celsius ", TemperatureUnit.CELSIUS),
    ("f", TemperatureUnit.FAHRENHEIT),
    ("Fahrenheit", TemperatureUnit.FAHRENHEIT),
])
def test_unit_parse(text, expected):
    assert TemperatureUnit.parse(text) is expected


def test_unit_parse_rejects_unknown():
    with pytest.raises(ValueError):
        TemperatureUnit.parse("kelvin")


def test_icon_url():
    assert icon_url("04d") == "https://openweathermap.org/img/wn/04d@2x.png"
    # no icon, nothing to show
    assert icon_url(None) is None
    assert icon_url("") is None
