"""
Central settings for the backend entrypoint.

ASSUMPTIONS / CHECK:
- MONGO_URI is provided (e.g., in a `.env`). It is only validated by the startup
  sequence, so building Settings never fails because it is missing.
- Settings are frozen and built once per process; pass them explicitly to the app
  factory and the startup sequence instead of importing a module-level instance.
"""
from __future__ import annotations
import os
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from errors import ConfigurationError


DATABASE_URL_ENV = "MONGO_URI"
PORT_ENV = "PORT"
DEFAULT_PORT = 5000

DEFAULT_ALLOWED_ORIGINS: Tuple[str, ...] = (
    "https://frontend-project-1-jlrj.onrender.com",  # deployed frontend
    "http://localhost:3000",                         # local dev frontend
)
ALLOWED_METHODS: Tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
DEFAULT_ALLOWED_HEADERS: Tuple[str, ...] = (
    "Content-Type",
    "Authorization",
    "X-Requested-With",
    "Accept",
    "Origin",
)

LOG_LEVELS: Tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    service_name: str = "conceptmap-backend"
    version: str = "0.1.0"

    # DB connection (Prisma reads the same URL; see db/client.py)
    database_url: Optional[str] = None
    db_connect_timeout: float = Field(default=10.0, gt=0)

    # Listener
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT

    # CORS. allowed_headers=None leaves request headers unrestricted.
    allowed_origins: Tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS
    allowed_methods: Tuple[str, ...] = ALLOWED_METHODS
    allowed_headers: Optional[Tuple[str, ...]] = DEFAULT_ALLOWED_HEADERS
    allow_credentials: bool = True
    cors_max_age: int = 600

    # JSON body parser
    json_body_limit: int = Field(default=100 * 1024, gt=0)

    log_level: str = "INFO"

    @property
    def has_database_url(self) -> bool:
        return bool(self.database_url and self.database_url.strip())


def _parse_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(key, f"{key} must be an integer, got {raw!r}") from e


def _parse_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(key, f"{key} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(key, f"{key} must be greater than zero")
    return value


def _parse_origins(raw: Optional[str]) -> Tuple[str, ...]:
    if raw is None:
        return DEFAULT_ALLOWED_ORIGINS
    return tuple(o.strip() for o in raw.split(",") if o.strip())


def load_settings(environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> Settings:
    """
    Build Settings from the process environment (or the given mapping).

    A `.env` file is loaded first when `dotenv` is set; real environment values win.
    Raises ConfigurationError naming the key for malformed values.
    """
    if dotenv:
        load_dotenv(override=False)
    env = os.environ if environ is None else environ

    port = _parse_int(env, PORT_ENV, DEFAULT_PORT)
    if not 0 <= port <= 65535:
        raise ConfigurationError(PORT_ENV, f"{PORT_ENV} out of range: {port}")

    any_header = env.get("CORS_ALLOW_ANY_HEADER", "").strip().lower() in _TRUTHY
    body_limit = _parse_int(env, "JSON_BODY_LIMIT", 100 * 1024)
    if body_limit <= 0:
        raise ConfigurationError("JSON_BODY_LIMIT", "JSON_BODY_LIMIT must be greater than zero")

    log_level = (env.get("LOG_LEVEL") or "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        raise ConfigurationError("LOG_LEVEL", f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

    return Settings(
        database_url=env.get(DATABASE_URL_ENV) or None,
        db_connect_timeout=_parse_float(env, "DB_CONNECT_TIMEOUT", 10.0),
        host=env.get("HOST") or "0.0.0.0",
        port=port,
        allowed_origins=_parse_origins(env.get("ALLOWED_ORIGINS")),
        allowed_headers=None if any_header else DEFAULT_ALLOWED_HEADERS,
        json_body_limit=body_limit,
        log_level=log_level,
    )
