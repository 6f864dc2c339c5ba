"""Tests del entry point."""

from unittest.mock import MagicMock, patch

import pytest

from sidekiq_bridge.config import Settings
from sidekiq_bridge.errors import ConfigError, StoreConnectionError
from sidekiq_bridge.runner import cli
from sidekiq_bridge.runner.backoff import BoundedBackoff
from sidekiq_bridge.runner.loop import PollLoop


@pytest.fixture
def settings():
    return Settings(
        redis_url="redis://localhost:6379/0",
        dd_api_key="secret",
        interval=30,
        redis_namespace="myapp",
        tags=["env:test"],
    )


class TestMain:
    """Códigos de salida y arranque del loop."""

    @patch("sidekiq_bridge.runner.cli.get_settings", side_effect=ConfigError("REDIS_URL is missing."))
    def test_config_error_exits_before_loop(self, _get_settings):
        with patch("sidekiq_bridge.runner.cli.build_loop") as build_loop:
            assert cli.main([]) == cli.EXIT_CONFIG_ERROR
            build_loop.assert_not_called()

    @patch("sidekiq_bridge.runner.cli.build_loop")
    @patch("sidekiq_bridge.runner.cli.get_settings")
    def test_store_unavailable_at_startup(self, get_settings, build_loop, settings):
        get_settings.return_value = settings
        loop = MagicMock()
        loop.start.side_effect = StoreConnectionError("Could not establish a connection to Redis")
        build_loop.return_value = loop

        assert cli.main([]) == cli.EXIT_STORE_UNAVAILABLE
        loop.run_forever.assert_not_called()

    @patch("sidekiq_bridge.runner.cli.build_loop")
    @patch("sidekiq_bridge.runner.cli.get_settings")
    def test_once_runs_single_iteration(self, get_settings, build_loop, settings):
        get_settings.return_value = settings
        loop = MagicMock()
        build_loop.return_value = loop

        assert cli.main(["--once", "--env-file", "custom.env"]) == 0

        get_settings.assert_called_once_with(env_file="custom.env")
        loop.start.assert_called_once()
        loop.run_forever.assert_called_once_with(max_iterations=1)
        loop.close.assert_called_once()

    @patch("sidekiq_bridge.runner.cli.build_loop")
    @patch("sidekiq_bridge.runner.cli.get_settings")
    def test_keyboard_interrupt_exits_cleanly(self, get_settings, build_loop, settings):
        get_settings.return_value = settings
        loop = MagicMock()
        loop.run_forever.side_effect = KeyboardInterrupt
        build_loop.return_value = loop

        assert cli.main([]) == 0
        loop.run_forever.assert_called_once_with(max_iterations=None)
        loop.close.assert_called_once()


class TestBuildLoop:

    def test_wires_dependencies(self, settings):
        loop = cli.build_loop(settings)

        assert isinstance(loop, PollLoop)
        assert loop._client.endpoint_url.endswith("?api_key=secret")
        assert loop._reader._ns.wrap("queues") == "myapp:queues"
        assert isinstance(loop._backoff, BoundedBackoff)
        assert loop._backoff.ceiling == 30
