"""Key namespacing for the Sidekiq keyspace."""

from __future__ import annotations

from typing import Optional


class Namespace:
    """Prefixes logical key names with an optional namespace.

    Sidekiq (via redis-namespace) stores every key as ``{ns}:{key}`` when a
    namespace is configured, and as the bare key otherwise.
    """

    def __init__(self, prefix: Optional[str] = None):
        self._prefix = prefix or None

    @property
    def prefix(self) -> Optional[str]:
        return self._prefix

    def wrap(self, key: str) -> str:
        if self._prefix is None:
            return key
        return f"{self._prefix}:{key}"

    def __repr__(self) -> str:
        return f"Namespace({self._prefix!r})"
