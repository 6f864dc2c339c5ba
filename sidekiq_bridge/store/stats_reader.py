"""Lectura de estadísticas de Sidekiq desde Redis.

Claves consumidas (con namespace opcional):
- ``queues``: set con los nombres de colas conocidas
- ``queue:{name}``: lista por cola, su longitud es el backlog
- ``stat:processed``: contador acumulado de jobs procesados
"""

from __future__ import annotations

import logging
from typing import Optional

import redis

from ..errors import StoreConnectionError
from .connection import RedisConnection
from .namespace import Namespace

logger = logging.getLogger(__name__)

QUEUES_KEY = "queues"
QUEUE_KEY_PREFIX = "queue"
PROCESSED_KEY = "stat:processed"


class StatReader:
    """Reads queue backlog and processed counter from the Sidekiq keyspace.

    Every ``redis.RedisError`` surfaces as ``StoreConnectionError``; a key that
    does not exist is a normal outcome and is never an error.
    """

    def __init__(self, connection: RedisConnection, namespace: Namespace):
        self._conn = connection
        self._ns = namespace

    def _client(self) -> redis.Redis:
        client = self._conn.client
        if client is None:
            raise StoreConnectionError("redis client not connected")
        return client

    def read_enqueued_total(self) -> Optional[int]:
        """Suma el backlog de todas las colas conocidas.

        Las longitudes se piden en un único round trip (pipeline sin
        transacción). Un set de colas vacío devuelve 0.
        """
        client = self._client()
        try:
            queues = client.smembers(self._ns.wrap(QUEUES_KEY))
            if not queues:
                return 0

            pipe = client.pipeline(transaction=False)
            for queue in sorted(queues):
                pipe.llen(self._ns.wrap(f"{QUEUE_KEY_PREFIX}:{queue}"))
            lengths = pipe.execute()
        except redis.exceptions.RedisError as e:
            self._conn.mark_broken()
            raise StoreConnectionError(f"reading enqueued total: {e}") from e

        total = sum(int(n) for n in lengths)
        logger.debug("[STATS] enqueued=%d queues=%d", total, len(queues))
        return total

    def read_processed_total(self) -> Optional[int]:
        """Lee el contador acumulado ``stat:processed``.

        Returns:
            El contador, o None si la clave no existe o no es un entero válido
        """
        key = self._ns.wrap(PROCESSED_KEY)
        client = self._client()
        try:
            raw = client.get(key)
        except redis.exceptions.RedisError as e:
            self._conn.mark_broken()
            raise StoreConnectionError(f"reading processed total: {e}") from e

        if raw is None:
            return None

        try:
            value = int(raw)
        except (TypeError, ValueError):
            logger.warning("[STATS] Ignoring non-integer value at %s: %r", key, raw)
            return None

        if value < 0:
            logger.warning("[STATS] Ignoring negative counter at %s: %d", key, value)
            return None
        return value
