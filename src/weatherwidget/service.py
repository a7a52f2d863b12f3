# orchestration and business rules.
# provides a pure function (payload -> record) and a fetch_weather coordinator that works with any backend client

from __future__ import annotations
import logging
import math
from typing import Any, Dict, Optional
from .client import IncompletePayloadError, NotFoundError, WeatherClient
from .models import WeatherRecord

logger = logging.getLogger(__name__)

REQUIRED_NUMBERS = ("temp", "humidity", "wind")

def _number(payload: Dict[str, Any], key: str) -> float:
    value = payload.get(key)
    # bool is an int subclass but never a measurement
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise IncompletePayloadError(f"Missing or non-numeric {key!r} in weather payload")
    try:
        number = float(value)
    except OverflowError as exc:
        # json allows integers far beyond float range
        raise IncompletePayloadError(f"Out of range {key!r} in weather payload") from exc
    if not math.isfinite(number):
        raise IncompletePayloadError(f"Non-finite {key!r} in weather payload: {number!r}")
    return number

def _optional_text(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None

# transform a flat payload into our typed value object, or raise; a partial record is never built
def record_from_payload(payload: Dict[str, Any], city: str) -> WeatherRecord:
    if payload.get("error"):
        raise NotFoundError(city)

    name = payload.get("city")
    if not isinstance(name, str) or not name.strip():
        raise IncompletePayloadError("Missing 'city' in weather payload")

    temp, humidity, wind = (_number(payload, key) for key in REQUIRED_NUMBERS)
    return WeatherRecord(
        city=name,
        temperature_celsius=temp,
        humidity_percent=humidity,
        wind_speed_mps=wind,
        condition_description=_optional_text(payload.get("condition")),
        icon_id=_optional_text(payload.get("icon")),
    )

# single lookup path: fetch -> classify -> record
def fetch_weather(client: WeatherClient, city: str) -> WeatherRecord:
    # callers strip and reject empty input, this layer trusts what it gets
    payload = client.get_current_weather(city)
    record = record_from_payload(payload, city)
    logger.debug("Fetched %s weather for %r: %s", client.name, city, record)
    return record
