"""Environment strategy for running application instances."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from instance_env.config import Settings
from instance_env.exporter import EnvReference
from instance_env.models import AppMessage, Instance


def _format_started_at(timestamp: float | None) -> str | None:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=UTC).strftime("%Y-%m-%d %H:%M:%S %z")


class StartingEnv:
    """Identity seed and system variables for a starting instance."""

    def __init__(self, message: AppMessage, instance: Instance, settings: Settings) -> None:
        self.message = message
        self.instance = instance
        self.settings = settings

    def vcap_application(self) -> dict[str, Any]:
        timestamp = self.instance.state_starting_timestamp
        started_at = _format_started_at(timestamp)
        started_at_timestamp = int(timestamp) if timestamp is not None else None

        return {
            "instance_id": self.instance.instance_id,
            "instance_index": self.message.index,
            "host": self.settings.app_host,
            "port": self.instance.container_port,
            "started_at": started_at,
            "started_at_timestamp": started_at_timestamp,
            # Older consumers read these names
            "start": started_at,
            "state_timestamp": started_at_timestamp,
            "application_id": self.message.application_id,
        }

    def system_environment_variables(self) -> list[tuple[str, Any]]:
        return [
            ("HOME", EnvReference("$PWD/app")),
            ("TMPDIR", EnvReference("$PWD/tmp")),
            ("VCAP_APP_HOST", self.settings.app_host),
            ("VCAP_APP_PORT", self.instance.container_port),
            ("PORT", EnvReference("$VCAP_APP_PORT")),
        ]
