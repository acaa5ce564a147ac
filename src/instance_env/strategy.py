"""Selection of the staging or starting environment strategy."""

from __future__ import annotations

from typing import Any, Protocol

import structlog

from instance_env import config
from instance_env.config import Settings
from instance_env.errors import StrategyResolutionError
from instance_env.models import AppMessage, Instance, StagingTask
from instance_env.staging import StagingEnv
from instance_env.starting import StartingEnv

log = structlog.get_logger()


class EnvStrategy(Protocol):
    """Context-specific view used by the composer.

    ``vcap_application`` returns a new dict on every call; the caller owns
    it and may mutate it.
    """

    message: AppMessage

    def vcap_application(self) -> dict[str, Any]: ...

    def system_environment_variables(self) -> list[tuple[str, Any]]: ...


def choose_strategy(
    message: AppMessage,
    instance_or_staging_task: Instance | StagingTask,
    settings: Settings | None = None,
) -> EnvStrategy:
    """Resolve the strategy for a staging task or a running instance.

    Raises:
        StrategyResolutionError: The handle is neither kind.
    """
    settings = settings or config.settings

    if isinstance(instance_or_staging_task, StagingTask):
        log.debug("env_strategy_selected", strategy="staging")
        return StagingEnv(message, instance_or_staging_task, settings)
    if isinstance(instance_or_staging_task, Instance):
        log.debug("env_strategy_selected", strategy="starting")
        return StartingEnv(message, instance_or_staging_task, settings)

    raise StrategyResolutionError(instance_or_staging_task)
