# startup configuration, read once from the environment (or a .env file) and then passed around
# the backend choice happens here so nothing downstream has to inspect host names at call time

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional
from dotenv import load_dotenv
from .client import ConfigurationError

LOCAL_BACKEND = "local"
OPENWEATHER_BACKEND = "openweather"
BACKENDS = (LOCAL_BACKEND, OPENWEATHER_BACKEND)

DEFAULT_LOCAL_URL = "http://localhost:8000/api/weather"
DEFAULT_TIMEOUT = 10.0
LOCAL_HOSTS = ("localhost", "127.0.0.1")

# either name works, the first non-empty one wins
API_KEY_VARS = ("WEATHER_API_KEY", "OPENWEATHER_API_KEY")

@dataclass(frozen=True)
class Settings:
    backend: str = OPENWEATHER_BACKEND
    api_key: Optional[str] = None
    local_url: str = DEFAULT_LOCAL_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "WARNING"

def is_local_host(hostname: Optional[str]) -> bool:
    return (hostname or "").strip().lower() in LOCAL_HOSTS

def _resolve_backend(env: Mapping[str, str]) -> str:
    explicit = (env.get("WEATHER_BACKEND") or "").strip().lower()
    if explicit:
        if explicit not in BACKENDS:
            raise ConfigurationError(f"WEATHER_BACKEND must be one of {BACKENDS} (got {explicit!r})")
        return explicit
    return LOCAL_BACKEND if is_local_host(env.get("WEATHER_HOST")) else OPENWEATHER_BACKEND

def _resolve_api_key(env: Mapping[str, str]) -> Optional[str]:
    for name in API_KEY_VARS:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return None

def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    if environ is None:
        load_dotenv()  # in production, environment variables are injected by the hosting platform
        environ = os.environ

    raw_timeout = environ.get("WEATHER_TIMEOUT")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    except ValueError as exc:
        raise ConfigurationError(f"WEATHER_TIMEOUT must be a number of seconds (got {raw_timeout!r})") from exc

    return Settings(
        backend=_resolve_backend(environ),
        api_key=_resolve_api_key(environ),
        local_url=environ.get("WEATHER_LOCAL_URL") or DEFAULT_LOCAL_URL,
        timeout=timeout,
        log_level=(environ.get("WEATHER_LOG_LEVEL") or "WARNING").upper(),
    )
