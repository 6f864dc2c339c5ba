"""Conexión a Redis."""

from __future__ import annotations

import logging
from typing import Optional

import redis

logger = logging.getLogger(__name__)

DEFAULT_SOCKET_TIMEOUT = 5.0


def safe_url(url: str) -> str:
    """Strip credentials from a redis URL for logging."""
    scheme, sep, rest = url.partition("://")
    if not sep:
        return url.split("@")[-1]
    return f"{scheme}://{rest.split('@')[-1]}"


class RedisConnection:
    """Gestiona la conexión a Redis.

    Owns a single ``redis.Redis`` client. ``reconnect()`` throws the old
    client away and builds a fresh one, so callers must always go through
    ``client`` instead of holding on to a reference.
    """

    def __init__(self, url: str, socket_timeout: float = DEFAULT_SOCKET_TIMEOUT):
        self._url = url
        self._socket_timeout = socket_timeout
        self._client: Optional[redis.Redis] = None
        self._connected = False

    @property
    def client(self) -> Optional[redis.Redis]:
        return self._client

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def url(self) -> str:
        return safe_url(self._url)

    def connect(self) -> bool:
        """Conecta a Redis.

        Returns:
            True si el PING fue exitoso
        """
        try:
            self._client = redis.Redis.from_url(
                self._url,
                decode_responses=True,
                socket_timeout=self._socket_timeout,
                socket_connect_timeout=self._socket_timeout,
            )
            self._client.ping()
            self._connected = True
            logger.info("[REDIS] Connected: %s", self.url)
            return True
        except (redis.exceptions.RedisError, ValueError) as e:
            self._connected = False
            logger.warning("[REDIS] Connection failed: %s", e)
            return False

    def reconnect(self) -> bool:
        """Descarta el cliente actual y conecta de nuevo."""
        self.disconnect()
        return self.connect()

    def mark_broken(self) -> None:
        self._connected = False

    def disconnect(self) -> None:
        """Desconecta de Redis."""
        if self._client is not None:
            try:
                self._client.close()
            except redis.exceptions.RedisError as e:
                logger.debug("[REDIS] Error closing client: %s", e)
        self._client = None
        self._connected = False
