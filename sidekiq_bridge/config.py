from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from .delivery.client import DD_SERIES_URL, DEFAULT_TIMEOUT
from .errors import ConfigError
from .store.connection import DEFAULT_SOCKET_TIMEOUT

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 60
DEFAULT_ENV_FILE = ".env"
BACKOFF_KINDS = ("constant", "exponential")


@dataclass(frozen=True)
class Settings:
    redis_url: str
    dd_api_key: str

    interval: int = DEFAULT_INTERVAL
    redis_namespace: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    dd_series_url: str = DD_SERIES_URL
    dd_timeout: float = DEFAULT_TIMEOUT
    redis_socket_timeout: float = DEFAULT_SOCKET_TIMEOUT

    reconnect_backoff: str = "exponential"
    reconnect_base_delay: float = 0.5
    reconnect_max_delay: float = 30.0

    log_level: str = "INFO"


def _required(env: Mapping[str, str], name: str) -> str:
    value = env.get(name)
    if not value:
        raise ConfigError(f"{name} is missing.")
    return value


def _non_negative_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} is not a valid number: {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{name} must be non-negative, got {value}")
    return value


def _float(env: Mapping[str, str], name: str, default: float, *, positive: bool = False) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} is not a valid number: {raw!r}") from None
    if value < 0 or (positive and value == 0):
        raise ConfigError(f"{name} must be {'positive' if positive else 'non-negative'}, got {raw}")
    return value


def parse_tags(raw: Optional[str]) -> List[str]:
    # "env:prod, role:worker," -> ["env:prod", "role:worker"]
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def get_settings(
    environ: Optional[Mapping[str, str]] = None,
    env_file: Optional[str] = None,
) -> Settings:
    """Lee la configuración del entorno una sola vez al arrancar.

    When ``environ`` is None the process environment is used, after loading
    the dotenv file (if present) without overriding real variables.

    Raises:
        ConfigError: variable requerida ausente o valor inválido
    """
    if environ is None:
        env_file = env_file or os.getenv("BRIDGE_ENV_FILE", DEFAULT_ENV_FILE)
        if env_file and Path(env_file).exists():
            load_dotenv(env_file, override=False)
            logger.debug("Loaded env file %s", env_file)
        environ = os.environ

    backoff = (environ.get("RECONNECT_BACKOFF") or "exponential").lower()
    if backoff not in BACKOFF_KINDS:
        raise ConfigError(
            f"RECONNECT_BACKOFF must be one of {', '.join(BACKOFF_KINDS)}, got {backoff!r}"
        )

    log_level = (environ.get("LOG_LEVEL") or "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"LOG_LEVEL is not a valid logging level: {log_level!r}")

    return Settings(
        redis_url=_required(environ, "REDIS_URL"),
        dd_api_key=_required(environ, "DD_API_KEY"),
        interval=_non_negative_int(environ, "INTERVAL", DEFAULT_INTERVAL),
        redis_namespace=environ.get("REDIS_NAMESPACE") or None,
        tags=parse_tags(environ.get("TAGS")),
        dd_series_url=environ.get("DD_SERIES_URL") or DD_SERIES_URL,
        dd_timeout=_float(environ, "DD_TIMEOUT", DEFAULT_TIMEOUT, positive=True),
        redis_socket_timeout=_float(
            environ, "REDIS_SOCKET_TIMEOUT", DEFAULT_SOCKET_TIMEOUT, positive=True,
        ),
        reconnect_backoff=backoff,
        reconnect_base_delay=_float(environ, "RECONNECT_BASE_DELAY", 0.5),
        reconnect_max_delay=_float(environ, "RECONNECT_MAX_DELAY", 30.0),
        log_level=log_level,
    )
