"""Redis layer - lectura del keyspace de Sidekiq."""

from .connection import RedisConnection
from .namespace import Namespace
from .stats_reader import StatReader

__all__ = ["RedisConnection", "Namespace", "StatReader"]
