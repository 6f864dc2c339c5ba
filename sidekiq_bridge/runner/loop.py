"""Poll loop y supervisor de la conexión a Redis.

Estados:
  CONNECTED     → tick normal: leer → delta → series → envío → sleep
  RECONNECTING  → reintenta conectar; al lograrlo el tick sigue normalmente

Un StoreConnectionError durante un tick abandona el tick (sin envío) y pasa a
RECONNECTING. El primer abandono reintenta sin sleep; si la lectura vuelve a
fallar tras reconectar, se aplica el backoff. Los errores de envío solo se loguean.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from ..delivery.client import DatadogClient
from ..errors import DeliveryError, StoreConnectionError
from ..metrics.builder import build_series
from ..metrics.delta import advance
from ..store.connection import RedisConnection
from ..store.stats_reader import StatReader
from .backoff import BackoffPolicy, ConstantBackoff, bounded
from .stats import BridgeStats, TickOutcome

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    """Estados del supervisor de conexión."""
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"


@dataclass
class LoopState:
    """Estado mutable propiedad exclusiva del loop."""
    connection_state: ConnectionState = ConnectionState.CONNECTED
    previous_processed: Optional[int] = None
    reconnect_attempt: int = 0


class PollLoop:
    """Lee estadísticas de Sidekiq y las envía a Datadog cada ``interval`` segundos.

    Uso:
        loop = PollLoop(connection, reader, client, tags, interval=60)
        loop.start()
        loop.run_forever()
    """

    def __init__(
        self,
        connection: RedisConnection,
        reader: StatReader,
        client: DatadogClient,
        tags: Sequence[str] = (),
        interval: float = 60,
        backoff: Optional[BackoffPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        self._conn = connection
        self._reader = reader
        self._client = client
        self._tags: List[str] = list(tags)
        self._interval = interval
        self._backoff = bounded(backoff or ConstantBackoff(0.0), interval)
        self._sleep = sleep
        self._clock = clock
        self.state = LoopState()
        self.stats = BridgeStats()

    def start(self) -> None:
        """Primera conexión. Sin Redis el proceso no puede arrancar.

        Raises:
            StoreConnectionError: si la conexión inicial falla
        """
        if not self._conn.connect():
            raise StoreConnectionError(
                f"Could not establish a connection to Redis at {self._conn.url}"
            )
        self.state.connection_state = ConnectionState.CONNECTED

    def close(self) -> None:
        self._conn.disconnect()

    def step(self) -> TickOutcome:
        """Un paso: reconexión si hace falta, luego el tick."""
        if (
            self.state.connection_state is ConnectionState.CONNECTED
            and not self._conn.is_connected
        ):
            logger.warning("[LOOP] Redis handle marked broken, reconnecting")
            self.state.connection_state = ConnectionState.RECONNECTING

        if self.state.connection_state is ConnectionState.RECONNECTING:
            self.state.reconnect_attempt += 1
            if not self._conn.reconnect():
                self.stats.record(TickOutcome.RECONNECT_FAILED, self._clock())
                logger.error(
                    "[LOOP] Reconnect attempt %d to %s failed",
                    self.state.reconnect_attempt, self._conn.url,
                )
                return TickOutcome.RECONNECT_FAILED

            logger.info(
                "[LOOP] Reconnected to %s (attempt %d)",
                self._conn.url, self.state.reconnect_attempt,
            )
            self.stats.reconnects += 1
            self.state.connection_state = ConnectionState.CONNECTED

        return self.run_tick()

    def run_tick(self) -> TickOutcome:
        """Lee, calcula el delta, arma el series y lo envía.

        ``reconnect_attempt`` only goes back to 0 once the reads succeed, so a
        store that accepts PING but keeps failing reads is still backed off.
        """
        try:
            enqueued = self._reader.read_enqueued_total()
            processed = self._reader.read_processed_total()
        except StoreConnectionError as e:
            logger.error("[LOOP] Redis read failed, reconnecting: %s", e)
            self.state.connection_state = ConnectionState.RECONNECTING
            self.state.previous_processed = None
            self.stats.record(TickOutcome.ABANDONED, self._clock())
            return TickOutcome.ABANDONED

        self.state.reconnect_attempt = 0
        delta, self.state.previous_processed = advance(
            self.state.previous_processed, processed,
        )
        series = build_series(enqueued, delta, self._tags, clock=self._clock)

        try:
            self._client.deliver(series)
        except DeliveryError as e:
            logger.error("[DELIVERY] %s", e)
            outcome = TickOutcome.DELIVERY_FAILED
        else:
            outcome = TickOutcome.DELIVERED

        self.stats.record(outcome, self._clock())
        return outcome

    def _pause_after(self, outcome: TickOutcome) -> float:
        if outcome in (TickOutcome.ABANDONED, TickOutcome.RECONNECT_FAILED):
            # primer abandono: reconexión inmediata; los siguientes, con backoff
            if self.state.reconnect_attempt == 0:
                return 0.0
            return self._backoff.delay(self.state.reconnect_attempt)
        return float(self._interval)

    def run_forever(self, max_iterations: Optional[int] = None) -> None:
        """Loop sin estado terminal; ``max_iterations`` limita los pasos (``--once``)."""
        iterations = 0
        while max_iterations is None or iterations < max_iterations:
            outcome = self.step()
            iterations += 1

            if outcome in (TickOutcome.DELIVERED, TickOutcome.DELIVERY_FAILED):
                logger.info("[LOOP] %s", self.stats)

            if max_iterations is not None and iterations >= max_iterations:
                return

            pause = self._pause_after(outcome)
            if pause > 0:
                if outcome in (TickOutcome.ABANDONED, TickOutcome.RECONNECT_FAILED):
                    logger.info("[LOOP] Retrying connection in %.2fs...", pause)
                self._sleep(pause)
