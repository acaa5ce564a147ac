"""Tests for staging and starting environment strategies."""

import pytest

from instance_env.config import Settings
from instance_env.errors import StrategyResolutionError
from instance_env.models import AppMessage, Instance, StagingTask
from instance_env.staging import StagingEnv
from instance_env.starting import StartingEnv
from instance_env.strategy import choose_strategy


class TestChooseStrategy:
    """Tests for choose_strategy()."""

    def test_staging_task_selects_staging(
        self, message: AppMessage, staging_task: StagingTask, settings: Settings
    ) -> None:
        strategy = choose_strategy(message, staging_task, settings)
        assert isinstance(strategy, StagingEnv)
        assert strategy.message is message

    def test_instance_selects_starting(
        self, message: AppMessage, instance: Instance, settings: Settings
    ) -> None:
        strategy = choose_strategy(message, instance, settings)
        assert isinstance(strategy, StartingEnv)
        assert strategy.message is message

    def test_unknown_handle_raises(self, message: AppMessage, settings: Settings) -> None:
        """Anything else cannot be resolved."""
        with pytest.raises(StrategyResolutionError) as exc_info:
            choose_strategy(message, object(), settings)  # type: ignore[arg-type]
        assert exc_info.value.details == {"handle_type": "object"}


class TestStartingEnv:
    """Tests for StartingEnv."""

    def test_vcap_application(
        self, message: AppMessage, instance: Instance, settings: Settings
    ) -> None:
        app = StartingEnv(message, instance, settings).vcap_application()

        assert app == {
            "instance_id": "inst-1",
            "instance_index": 2,
            "host": "0.0.0.0",
            "port": 61001,
            "started_at": "1970-01-01 00:00:00 +0000",
            "started_at_timestamp": 0,
            "start": "1970-01-01 00:00:00 +0000",
            "state_timestamp": 0,
            "application_id": "app-guid-1",
        }

    def test_vcap_application_is_fresh_each_call(
        self, message: AppMessage, instance: Instance, settings: Settings
    ) -> None:
        """Callers may mutate the mapping without affecting later calls."""
        strategy = StartingEnv(message, instance, settings)
        first = strategy.vcap_application()
        first["instance_id"] = "changed"
        assert strategy.vcap_application()["instance_id"] == "inst-1"

    def test_missing_start_timestamp(self, message: AppMessage, settings: Settings) -> None:
        app = StartingEnv(message, Instance(instance_id="i"), settings).vcap_application()
        assert app["started_at"] is None
        assert app["state_timestamp"] is None

    def test_system_environment_variables(
        self, message: AppMessage, instance: Instance, settings: Settings
    ) -> None:
        env = StartingEnv(message, instance, settings).system_environment_variables()

        assert env == [
            ("HOME", "$PWD/app"),
            ("TMPDIR", "$PWD/tmp"),
            ("VCAP_APP_HOST", "0.0.0.0"),
            ("VCAP_APP_PORT", 61001),
            ("PORT", "$VCAP_APP_PORT"),
        ]


class TestStagingEnv:
    """Tests for StagingEnv."""

    def test_vcap_application(
        self, message: AppMessage, staging_task: StagingTask, settings: Settings
    ) -> None:
        app = StagingEnv(message, staging_task, settings).vcap_application()
        assert app == {
            "application_id": "app-guid-1",
            "staging_task_id": "stage-1",
            "host": "0.0.0.0",
        }

    def test_system_environment_variables(
        self, message: AppMessage, staging_task: StagingTask, settings: Settings
    ) -> None:
        env = StagingEnv(message, staging_task, settings).system_environment_variables()
        assert env == [("BUILDPACK_CACHE", "/var/cache/bp"), ("STAGING_TIMEOUT", 300)]

    def test_defaults_from_settings(self, message: AppMessage, settings: Settings) -> None:
        """Task without timeout or cache falls back to settings."""
        env = StagingEnv(message, StagingTask(task_id="t"), settings).system_environment_variables()
        assert env == [("BUILDPACK_CACHE", "/tmp/buildpack_cache"), ("STAGING_TIMEOUT", 900)]
