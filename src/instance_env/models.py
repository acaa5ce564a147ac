"""Application descriptor and execution context handles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class AppMessage(BaseModel):
    """Metadata describing one application instance.

    Mirrors the start message delivered to the agent: identity, limits,
    bound services and the raw ``KEY=VALUE`` user environment.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    # Identity fields pass through unvalidated into VCAP_APPLICATION
    name: Any = None
    version: Any = None
    uris: Any = None
    limits: Any = None
    mem_limit: Any = None
    env: list[str] | None = None
    services: list[dict[str, Any]] = Field(default_factory=list)
    application_id: Any = Field(default=None, alias="droplet")
    index: Any = None

    @field_validator("services", mode="before")
    @classmethod
    def _services_default(cls, value: Any) -> Any:
        return [] if value is None else value

    @model_validator(mode="before")
    @classmethod
    def _mem_limit_from_limits(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("mem_limit") is None:
            limits = data.get("limits")
            if isinstance(limits, dict) and limits.get("mem") is not None:
                data = {**data, "mem_limit": limits["mem"]}
        return data

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> AppMessage:
        """Build a message from a decoded JSON/YAML mapping."""
        return cls.model_validate(data)


@dataclass(frozen=True)
class StagingTask:
    """Handle for a staging (build) task."""

    task_id: str
    staging_timeout: int | None = None
    buildpack_cache: str | None = None


@dataclass(frozen=True)
class Instance:
    """Handle for a running application instance."""

    instance_id: str
    container_port: int | None = None
    state_starting_timestamp: float | None = None
