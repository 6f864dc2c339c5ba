"""CLI entry point for the bridge."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from ..config import Settings, get_settings
from ..delivery.client import DatadogClient
from ..errors import ConfigError, StoreConnectionError
from ..store.connection import RedisConnection
from ..store.namespace import Namespace
from ..store.stats_reader import StatReader
from .backoff import build_backoff
from .loop import PollLoop

logger = logging.getLogger(__name__)

EXIT_STORE_UNAVAILABLE = 1
EXIT_CONFIG_ERROR = 2


def build_loop(settings: Settings) -> PollLoop:
    """Arma el loop con sus dependencias a partir de la configuración."""
    connection = RedisConnection(settings.redis_url, socket_timeout=settings.redis_socket_timeout)
    reader = StatReader(connection, Namespace(settings.redis_namespace))
    client = DatadogClient(
        settings.dd_api_key,
        base_url=settings.dd_series_url,
        timeout=settings.dd_timeout,
    )
    return PollLoop(
        connection,
        reader,
        client,
        tags=settings.tags,
        interval=settings.interval,
        backoff=build_backoff(settings),
    )


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Sidekiq queue stats -> Datadog series bridge")
    p.add_argument("--once", action="store_true", help="run a single iteration and exit")
    p.add_argument("--env-file", default=None, help="dotenv file to load (default: $BRIDGE_ENV_FILE or .env)")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    try:
        settings = get_settings(env_file=args.env_file)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG_ERROR

    logging.getLogger().setLevel(settings.log_level)

    loop = build_loop(settings)
    logger.info("Sidekiq bridge started")
    logger.info(
        "Config: interval=%ds namespace=%s tags=%s backoff=%s",
        settings.interval,
        settings.redis_namespace or "-",
        ",".join(settings.tags) or "-",
        settings.reconnect_backoff,
    )

    try:
        loop.start()
    except StoreConnectionError as e:
        logger.error("%s", e)
        return EXIT_STORE_UNAVAILABLE

    try:
        loop.run_forever(max_iterations=1 if args.once else None)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        loop.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
