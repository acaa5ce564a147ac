"""``DATABASE_URL`` derivation from bound relational services."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from functools import cached_property
from typing import Any
from urllib.parse import SplitResult, urlsplit, urlunsplit

import structlog

from instance_env.errors import DatabaseUrlError

log = structlog.get_logger()

VALID_DB_TYPES = ("mysql", "mysql2", "postgres", "postgresql", "db2", "informix")

# Rails-style adapter names
_SCHEME_REWRITES = {"mysql": "mysql2", "postgresql": "postgres"}

_PRODUCTION_NAME = re.compile(r"(production|prod)$")
_USER_INFO = re.compile(r"//.+@")


def _mask_credentials(uri: str) -> str:
    return _USER_INFO.sub("//USER_NAME_PASS@", uri)


class DatabaseUriGenerator:
    """Pick the relational service binding that backs ``DATABASE_URL``.

    Only services whose ``credentials.uri`` uses a known relational scheme
    are candidates. With several candidates, a service named ``*production``
    or ``*prod`` wins, otherwise the first binding is used.
    """

    def __init__(self, services: Iterable[Mapping[str, Any]] | None) -> None:
        self._services = list(services or [])

    @property
    def database_uri(self) -> str | None:
        """Connection string for the selected binding, or None."""
        candidate = self._bound_database_uri()
        if candidate is None:
            return None
        scheme = _SCHEME_REWRITES.get(candidate.scheme, candidate.scheme)
        return urlunsplit(candidate._replace(scheme=scheme))

    def _bound_database_uri(self) -> SplitResult | None:
        databases = self._relational_databases
        if not databases:
            return None
        if len(databases) > 1:
            for name, uri in databases:
                if name and _PRODUCTION_NAME.search(name):
                    return uri
            log.debug("database_uri_ambiguous", candidates=len(databases))
        return databases[0][1]

    @cached_property
    def _relational_databases(self) -> list[tuple[str | None, SplitResult]]:
        databases: list[tuple[str | None, SplitResult]] = []
        for service in self._services:
            credentials = service.get("credentials") or {}
            raw_uri = credentials.get("uri") if isinstance(credentials, Mapping) else None
            if not raw_uri:
                continue

            try:
                uri = urlsplit(str(raw_uri))
                # Port parsing is lazy; force it so malformed ports surface here
                uri.port  # noqa: B018
            except ValueError as e:
                raise DatabaseUrlError(
                    f"Invalid database uri: {_mask_credentials(str(raw_uri))}",
                    details={"service": service.get("name")},
                ) from e

            if uri.scheme in VALID_DB_TYPES:
                databases.append((service.get("name"), uri))
        return databases
