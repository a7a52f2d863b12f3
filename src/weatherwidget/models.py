# models and small unit helpers to keep data shapes explicit and reusable across the app

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{icon_id}@2x.png"

@dataclass(frozen=True)
class WeatherRecord:
    # immutable snapshot for one city at fetch time, temperature always stored in celsius
    city: str
    temperature_celsius: float
    humidity_percent: float
    wind_speed_mps: float
    condition_description: Optional[str] = None
    icon_id: Optional[str] = None

class TemperatureUnit(Enum):
    CELSIUS = "C"
    FAHRENHEIT = "F"

    @classmethod
    def parse(cls, text: str) -> "TemperatureUnit":
        key = text.strip().lower()
        if key in ("c", "celsius"):
            return cls.CELSIUS
        if key in ("f", "fahrenheit"):
            return cls.FAHRENHEIT
        raise ValueError(f"Unknown temperature unit: {text!r}")

    def toggled(self) -> "TemperatureUnit":
        return TemperatureUnit.FAHRENHEIT if self is TemperatureUnit.CELSIUS else TemperatureUnit.CELSIUS

def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32

def display_temperature(celsius: float, unit: TemperatureUnit) -> float:
    # display-only transform, the stored celsius value is never touched
    if unit is TemperatureUnit.FAHRENHEIT:
        return celsius_to_fahrenheit(celsius)
    return float(celsius)

def icon_url(icon_id: Optional[str]) -> Optional[str]:
    if not icon_id:
        return None
    return ICON_URL_TEMPLATE.format(icon_id=icon_id)
