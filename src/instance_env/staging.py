"""Environment strategy for staging (build) tasks."""

from __future__ import annotations

from typing import Any

from instance_env.config import Settings
from instance_env.models import AppMessage, StagingTask


class StagingEnv:
    """Identity seed and system variables for a staging task."""

    def __init__(self, message: AppMessage, staging_task: StagingTask, settings: Settings) -> None:
        self.message = message
        self.staging_task = staging_task
        self.settings = settings

    def vcap_application(self) -> dict[str, Any]:
        return {
            "application_id": self.message.application_id,
            "staging_task_id": self.staging_task.task_id,
            "host": self.settings.app_host,
        }

    def system_environment_variables(self) -> list[tuple[str, Any]]:
        task = self.staging_task
        return [
            ("BUILDPACK_CACHE", task.buildpack_cache or self.settings.default_buildpack_cache),
            ("STAGING_TIMEOUT", task.staging_timeout or self.settings.default_staging_timeout),
        ]
