"""Service credential filtering for ``VCAP_SERVICES``.

Service brokers may attach arbitrary metadata to a binding. Only the
whitelisted keys below ever reach the application environment.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

WHITELIST_SERVICE_KEYS = (
    "name",
    "label",
    "tags",
    "plan",
    "plan_option",
    "credentials",
    "syslog_drain_url",
)


def filter_services(services: Iterable[Mapping[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Group bound services by label, keeping only whitelisted keys.

    Keys missing from a service, or set to ``None`` or ``False``, are left
    out of its entry rather than emitted as null. Empty strings, lists and
    mappings are kept. Within a label, services keep their input order.
    Labels without services never appear.

    Args:
        services: Bound-service descriptors as delivered by the broker.

    Returns:
        Mapping of service label to filtered service dicts.
    """
    grouped: defaultdict[str, list[dict[str, Any]]] = defaultdict(list)

    for service in services:
        filtered = {
            key: service[key]
            for key in WHITELIST_SERVICE_KEYS
            if service.get(key) is not None and service.get(key) is not False
        }
        grouped[service.get("label")].append(filtered)

    return dict(grouped)
