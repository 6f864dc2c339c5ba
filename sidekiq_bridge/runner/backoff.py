"""Backoff entre intentos de reconexión a Redis.

Ninguna política bloquea más que el intervalo de polling: ``bounded`` recorta
cualquier delay al intervalo configurado.
"""

from __future__ import annotations

import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import Settings


class BackoffPolicy(ABC):
    """Política de espera entre reintentos."""

    @abstractmethod
    def delay(self, attempt: int) -> float:
        """Delay en segundos antes del intento ``attempt`` (1-indexed)."""


@dataclass
class ConstantBackoff(BackoffPolicy):
    """Mismo delay en cada intento. ``delay_seconds=0`` reintenta sin pausa."""

    delay_seconds: float = 0.0

    def delay(self, attempt: int) -> float:
        return max(0.0, self.delay_seconds)


@dataclass
class ExponentialBackoff(BackoffPolicy):
    """Backoff exponencial con tope y jitter de ±25%."""

    base_delay: float = 0.5
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True
    rng: Optional[Callable[[float, float], float]] = None

    def delay(self, attempt: int) -> float:
        if self.base_delay <= 0 or self.max_delay <= 0:
            return 0.0

        exponent = max(1, attempt) - 1
        if self.exponential_base > 1:
            # pasado este exponente el delay ya está en el tope
            ceiling = math.log(max(self.max_delay / self.base_delay, 1.0), self.exponential_base)
            exponent = min(exponent, math.ceil(ceiling))

        delay = self.base_delay * (self.exponential_base ** exponent)
        delay = min(delay, self.max_delay)

        if self.jitter:
            uniform = self.rng or random.uniform
            jitter_range = delay * 0.25
            delay += uniform(-jitter_range, jitter_range)

        return min(max(0.0, delay), self.max_delay)


@dataclass
class BoundedBackoff(BackoffPolicy):
    """Recorta la política interna a ``ceiling`` segundos."""

    inner: BackoffPolicy
    ceiling: float

    def delay(self, attempt: int) -> float:
        return min(self.inner.delay(attempt), max(0.0, self.ceiling))


def bounded(policy: BackoffPolicy, interval: float) -> BackoffPolicy:
    return BoundedBackoff(inner=policy, ceiling=interval)


def build_backoff(settings: Settings) -> BackoffPolicy:
    """Construye la política desde la configuración, acotada al intervalo."""
    if settings.reconnect_backoff == "constant":
        policy: BackoffPolicy = ConstantBackoff(settings.reconnect_base_delay)
    else:
        policy = ExponentialBackoff(
            base_delay=settings.reconnect_base_delay,
            max_delay=settings.reconnect_max_delay,
        )
    return bounded(policy, settings.interval)
