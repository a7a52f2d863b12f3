# presentation state as a small tagged union: Idle -> Loading -> Success | Failure
# every search gets an increasing request id and only the latest one may write the state (last request wins)

from __future__ import annotations
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union
from .client import NotFoundError, WeatherAPIError, WeatherClient
from .models import TemperatureUnit, WeatherRecord, display_temperature
from .service import fetch_weather

logger = logging.getLogger(__name__)

class FailureKind(Enum):
    NOT_FOUND = "City not found"
    SERVER_ERROR = "Server Error"

@dataclass(frozen=True)
class Idle:
    pass

@dataclass(frozen=True)
class Loading:
    city: str
    request_id: int

@dataclass(frozen=True)
class Success:
    record: WeatherRecord

@dataclass(frozen=True)
class Failure:
    kind: FailureKind

    @property
    def message(self) -> str:
        return self.kind.value

State = Union[Idle, Loading, Success, Failure]
Fetcher = Callable[[WeatherClient, str], WeatherRecord]

def classify_failure(exc: WeatherAPIError) -> Failure:
    # the ui only distinguishes two messages, finer detail goes to the log
    if isinstance(exc, NotFoundError):
        return Failure(FailureKind.NOT_FOUND)
    return Failure(FailureKind.SERVER_ERROR)

class WeatherSession:
    def __init__(
        self,
        client: WeatherClient,
        unit: TemperatureUnit = TemperatureUnit.CELSIUS,
        fetcher: Fetcher = fetch_weather,
        max_workers: int = 2,
    ):
        self.client = client
        self.unit = unit
        self.query: Optional[str] = None
        self._fetcher = fetcher
        self._state: State = Idle()
        self._latest_id = 0
        self._lock = threading.Lock()
        self._max_workers = max_workers
        self._pool: Optional[ThreadPoolExecutor] = None

    @property
    def state(self) -> State:
        with self._lock:
            return self._state

    @property
    def record(self) -> Optional[WeatherRecord]:
        state = self.state
        return state.record if isinstance(state, Success) else None

    def temperature(self) -> Optional[float]:
        record = self.record
        if record is None:
            return None
        return display_temperature(record.temperature_celsius, self.unit)

    def set_unit(self, unit: TemperatureUnit) -> None:
        self.unit = unit

    def toggle_unit(self) -> TemperatureUnit:
        self.unit = self.unit.toggled()
        return self.unit

    def _begin(self, city: Optional[str]) -> Optional[Loading]:
        text = (city or "").strip()
        if not text:
            return None
        with self._lock:
            self._latest_id += 1
            self.query = text
            self._state = Loading(text, self._latest_id)
            return self._state

    def _complete(self, loading: Loading) -> State:
        try:
            record = self._fetcher(self.client, loading.city)
            outcome: State = Success(record)
        except WeatherAPIError as exc:
            logger.warning("Lookup for %r failed: %s", loading.city, exc)
            outcome = classify_failure(exc)
        except Exception:
            # a bug, not a lookup failure: still leave Loading, then let it surface
            logger.exception("Lookup for %r crashed", loading.city)
            self._settle(loading, Failure(FailureKind.SERVER_ERROR))
            raise
        return self._settle(loading, outcome)

    def _settle(self, loading: Loading, outcome: State) -> State:
        # only the latest request may write the state
        with self._lock:
            if loading.request_id != self._latest_id:
                logger.info("Discarding stale result for %r (request %d, latest %d)",
                            loading.city, loading.request_id, self._latest_id)
            else:
                self._state = outcome
                logger.info("Lookup for %r -> %s", loading.city, type(outcome).__name__)
            return self._state

    def search(self, city: Optional[str]) -> State:
        # empty or whitespace-only input never reaches the network
        loading = self._begin(city)
        if loading is None:
            return self.state
        return self._complete(loading)

    def refresh(self) -> State:
        return self.search(self.query)

    def submit(self, city: Optional[str]) -> "Future[State]":
        # background lookup, the request id is taken now so submission order decides who wins
        loading = self._begin(city)
        if loading is None:
            done: "Future[State]" = Future()
            done.set_result(self.state)
            return done
        if self._pool is None:
            self._pool = ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="weather")
        return self._pool.submit(self._complete, loading)

    def close(self) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None
        if self.client is not None:
            self.client.close()

    def __enter__(self) -> "WeatherSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
