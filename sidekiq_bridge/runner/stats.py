"""Contadores del poll loop."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TickOutcome(str, Enum):
    """Resultado de un paso del loop."""
    DELIVERED = "delivered"
    DELIVERY_FAILED = "delivery_failed"
    ABANDONED = "abandoned"
    RECONNECT_FAILED = "reconnect_failed"


@dataclass
class BridgeStats:
    """Estadísticas acumuladas desde el arranque."""

    ticks: int = 0
    delivered: int = 0
    delivery_failures: int = 0
    abandoned_ticks: int = 0
    reconnects: int = 0
    reconnect_failures: int = 0
    last_delivery_at: float = 0

    def record(self, outcome: TickOutcome, now: float) -> None:
        """Acumula el resultado de un paso."""
        if outcome is TickOutcome.RECONNECT_FAILED:
            self.reconnect_failures += 1
            return

        self.ticks += 1
        if outcome is TickOutcome.DELIVERED:
            self.delivered += 1
            self.last_delivery_at = now
        elif outcome is TickOutcome.DELIVERY_FAILED:
            self.delivery_failures += 1
        else:
            self.abandoned_ticks += 1

    def __str__(self) -> str:
        return (
            f"ticks={self.ticks} delivered={self.delivered} "
            f"delivery_failures={self.delivery_failures} abandoned={self.abandoned_ticks} "
            f"reconnects={self.reconnects} reconnect_failures={self.reconnect_failures}"
        )
