"""Environment composition for staging tasks and running instances.

Builds the ordered variable list injected into an application container:
platform variables first (``VCAP_APPLICATION``, ``VCAP_SERVICES``,
``MEMORY_LIMIT``, optional ``DATABASE_URL``, then strategy-specific
variables), followed by the user's own declarations.

Usage::

    composer = EnvComposer(message, instance)
    script = composer.exported_environment_variables()
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from functools import cached_property
from typing import Any, Generic, TypeVar, overload

import structlog

from instance_env.database_uri import DatabaseUriGenerator
from instance_env.exporter import EnvExporter, ShellExporter
from instance_env.models import AppMessage, Instance, StagingTask
from instance_env.services import filter_services
from instance_env.strategy import EnvStrategy, choose_strategy

log = structlog.get_logger()

# Legacy key -> canonical key in VCAP_APPLICATION
_APPLICATION_ALIASES = (
    ("version", "application_version"),
    ("name", "application_name"),
    ("uris", "application_uris"),
    ("users", "application_users"),
)

T = TypeVar("T")

DatabaseUriResolver = Callable[[Iterable[Mapping[str, Any]]], str | None]


def resolve_database_uri(services: Iterable[Mapping[str, Any]]) -> str | None:
    """Default ``DATABASE_URL`` resolver."""
    return DatabaseUriGenerator(services).database_uri


def _encode(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def translate_env(env: Iterable[str] | None) -> list[tuple[str, str]]:
    """Split ``KEY=VALUE`` declarations on the first ``=`` only."""
    if not env:
        return []
    pairs = []
    for entry in env:
        key, _, value = entry.partition("=")
        pairs.append((key, value))
    return pairs


class EnvComposer(Generic[T]):
    """Compose system and user environment variables for one task.

    The composer only talks to the :class:`EnvStrategy` interface, so it is
    unaware of whether it serves a staging task or a running instance.
    Derived structures are computed once and reused. The exported lists
    have the exporter's output type (``str`` for the default shell exporter).
    """

    @overload
    def __init__(
        self: EnvComposer[str],
        message: AppMessage,
        instance_or_staging_task: Instance | StagingTask | None = ...,
        *,
        exporter: None = ...,
        strategy: EnvStrategy | None = ...,
        database_uri_resolver: DatabaseUriResolver = ...,
    ) -> None: ...

    @overload
    def __init__(
        self,
        message: AppMessage,
        instance_or_staging_task: Instance | StagingTask | None = ...,
        *,
        exporter: EnvExporter[T],
        strategy: EnvStrategy | None = ...,
        database_uri_resolver: DatabaseUriResolver = ...,
    ) -> None: ...

    def __init__(
        self,
        message: AppMessage,
        instance_or_staging_task: Instance | StagingTask | None = None,
        *,
        exporter: EnvExporter[Any] | None = None,
        strategy: EnvStrategy | None = None,
        database_uri_resolver: DatabaseUriResolver = resolve_database_uri,
    ) -> None:
        self._exporter: EnvExporter[Any] = exporter or ShellExporter()
        self.strategy_env = strategy or choose_strategy(message, instance_or_staging_task)
        self._resolve_database_uri = database_uri_resolver

    @property
    def message(self) -> AppMessage:
        return self.strategy_env.message

    def exported_system_environment_variables(self) -> T:
        return self._to_export(self.system_environment_variables())

    def exported_user_environment_variables(self) -> T:
        return self._to_export(self.user_environment_variables())

    def exported_environment_variables(self) -> T:
        """Export system and user variables together in a single pass."""
        return self._to_export(self.environment_variables())

    def environment_variables(self) -> list[tuple[str, Any]]:
        return self.system_environment_variables() + self.user_environment_variables()

    def user_environment_variables(self) -> list[tuple[str, str]]:
        return translate_env(self.message.env)

    def system_environment_variables(self) -> list[tuple[str, Any]]:
        """Platform variables in their fixed order.

        ``DATABASE_URL`` is only considered when services are bound, and only
        emitted when the resolver finds a relational binding.
        """
        message = self.message
        env: list[tuple[str, Any]] = [
            ("VCAP_APPLICATION", _encode(self.vcap_application)),
            ("VCAP_SERVICES", _encode(self.vcap_services)),
            ("MEMORY_LIMIT", f"{'' if message.mem_limit is None else message.mem_limit}m"),
        ]

        if message.services:
            database_uri = self._resolve_database_uri(message.services)
            if database_uri is not None:
                env.append(("DATABASE_URL", database_uri))

        env.extend(self.strategy_env.system_environment_variables())

        log.debug(
            "system_env_composed",
            keys=[key for key, _ in env],
            service_count=len(message.services),
        )
        return env

    @cached_property
    def vcap_services(self) -> dict[str, list[dict[str, Any]]]:
        return filter_services(self.message.services)

    @cached_property
    def vcap_application(self) -> dict[str, Any]:
        message = self.message
        application = self.strategy_env.vcap_application()

        application["limits"] = message.limits
        application["application_version"] = message.version
        application["application_name"] = message.name
        application["application_uris"] = message.uris

        for alias, canonical in _APPLICATION_ALIASES:
            if canonical in application:
                application[alias] = application[canonical]

        return application

    def _to_export(self, env: list[tuple[str, Any]]) -> T:
        return self._exporter.export(env)
