"""Runner package - poll loop, backoff y CLI.

Modules:
- backoff: políticas de espera entre reconexiones
- stats: contadores del loop
- loop: PollLoop (supervisor de conexión + tick)
- cli: entry point (main)
"""

from .backoff import BackoffPolicy, ConstantBackoff, ExponentialBackoff, build_backoff
from .loop import ConnectionState, LoopState, PollLoop, TickOutcome

__all__ = [
    "BackoffPolicy",
    "ConstantBackoff",
    "ExponentialBackoff",
    "build_backoff",
    "ConnectionState",
    "LoopState",
    "PollLoop",
    "TickOutcome",
]
