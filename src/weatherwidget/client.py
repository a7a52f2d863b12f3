# OOP boundary for external i/o
# all http/keys/error classification live here, so the rest of the code is pure and testable
# two interchangeable backends share one base class, the choice is made once by build_client()

from __future__ import annotations
import logging
import threading
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from urllib.parse import quote, urlencode
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

if TYPE_CHECKING:
    from .settings import Settings

logger = logging.getLogger(__name__)

class WeatherAPIError(RuntimeError):
    # root of every failure raised by this layer
    pass

class ConfigurationError(WeatherAPIError):
    pass

class RemoteError(WeatherAPIError):
    def __init__(self, status_code: int, body: str = "", message: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"HTTP {status_code}. Body: {body}")

class NotFoundError(WeatherAPIError):
    def __init__(self, city: str):
        self.city = city
        super().__init__(f"City not found: {city!r}")

class TransportError(WeatherAPIError):
    pass

class IncompletePayloadError(WeatherAPIError):
    pass

def _first(items: Any) -> Dict[str, Any]:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}

def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}

def remap_openweather_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    # openweather shape -> the flat shape the local backend already returns
    # missing nested fields become None instead of raising
    main = _section(data, "main")
    weather = _first(data.get("weather"))
    return {
        "city": data.get("name"),
        "temp": main.get("temp"),
        "humidity": main.get("humidity"),
        "wind": _section(data, "wind").get("speed"),
        "condition": weather.get("description"),
        "icon": weather.get("icon"),
    }

class WeatherClient:
    # shared http behavior, subclasses only describe the url and the payload shape
    name = "base"
    DEFAULT_TIMEOUT = 10.0
    BODY_SNIPPET = 300

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = "weather-widget/0.1",
    ):
        self.timeout = timeout
        self.user_agent = user_agent

        # each worker thread lazily obtains its own session through _session()
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

        # exactly one request per lookup, the transport must never retry on its own
        self._retry = Retry(total=0, raise_on_status=False)

    def _build_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update({"User-Agent": self.user_agent})
        adapter = HTTPAdapter(max_retries=self._retry)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    def _session(self) -> requests.Session:
        sess = getattr(self._local, "session", None)
        if sess is None:
            sess = self._build_session()
            self._local.session = sess
            with self._sessions_lock:
                self._sessions.append(sess)
        return sess

    def close(self) -> None:
        # closes the session of every thread that used this client
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
            self._local = threading.local()
        for sess in sessions:
            sess.close()

    def _url(self, city: str) -> str:
        raise NotImplementedError

    def _normalize(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return data

    def get_current_weather(self, city: str) -> Dict[str, Any]:
        # one GET, classified failures, payload returned in the flat local-backend shape
        url = self._url(city)
        logger.debug("GET %s weather for %r", self.name, city)

        try:
            resp = self._session().get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"Request error for {city!r}: {exc}") from exc

        if resp.status_code >= 400:
            # best effort body snippet for triage, never fails on its own
            snippet = (resp.text or "")[: self.BODY_SNIPPET]
            logger.warning("%s returned HTTP %s for %r: %s", self.name, resp.status_code, city, snippet)
            raise RemoteError(
                resp.status_code,
                snippet,
                f"{self.name} error: HTTP {resp.status_code} for {city!r}. Body: {snippet}",
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise WeatherAPIError(f"Invalid JSON for {city!r}: {exc}") from exc

        if not isinstance(data, dict):
            raise WeatherAPIError(f"Unexpected {self.name} response shape for {city!r}: {type(data).__name__}")

        return self._normalize(data)

class LocalBackendClient(WeatherClient):
    # development backend that already answers in the normalized shape
    name = "local"
    DEFAULT_URL = "http://localhost:8000/api/weather"

    def __init__(self, base_url: str = DEFAULT_URL, **kwargs: Any):
        super().__init__(**kwargs)
        self.base_url = base_url

    def _url(self, city: str) -> str:
        return f"{self.base_url}?{urlencode({'city': city}, quote_via=quote)}"

class OpenWeatherClient(WeatherClient):
    # direct call to the public provider, metric units so temp is already celsius
    name = "openweather"
    BASE_URL = "https://api.openweathermap.org/data/2.5/weather"

    def __init__(self, api_key: Optional[str], base_url: str = BASE_URL, **kwargs: Any):
        if not api_key:
            # fail before any network call when the key is missing
            raise ConfigurationError("Weather API key missing: set WEATHER_API_KEY or OPENWEATHER_API_KEY")
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = base_url

    def _url(self, city: str) -> str:
        params = {"q": city, "appid": self.api_key, "units": "metric"}
        return f"{self.base_url}?{urlencode(params, quote_via=quote)}"

    def _normalize(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return remap_openweather_payload(data)

def build_client(settings: "Settings") -> WeatherClient:
    # strategy selection happens once at startup
    if settings.backend == LocalBackendClient.name:
        return LocalBackendClient(base_url=settings.local_url, timeout=settings.timeout)
    if settings.backend == OpenWeatherClient.name:
        return OpenWeatherClient(api_key=settings.api_key, timeout=settings.timeout)
    raise ConfigurationError(f"Unknown weather backend: {settings.backend!r}")
