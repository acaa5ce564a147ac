"""Instance environment composition.

Builds the environment variables injected into staging tasks and running
application instances from the application message, bound services and
user declarations.
"""

from instance_env.composer import EnvComposer, translate_env
from instance_env.database_uri import DatabaseUriGenerator
from instance_env.errors import (
    DatabaseUrlError,
    InstanceEnvError,
    MessageLoadError,
    StrategyResolutionError,
)
from instance_env.exporter import (
    DictExporter,
    EnvExporter,
    EnvReference,
    ShellExporter,
    shell_quote,
)
from instance_env.models import AppMessage, Instance, StagingTask
from instance_env.services import WHITELIST_SERVICE_KEYS, filter_services
from instance_env.strategy import EnvStrategy, choose_strategy

__all__ = [
    "WHITELIST_SERVICE_KEYS",
    "AppMessage",
    "DatabaseUriGenerator",
    "DatabaseUrlError",
    "DictExporter",
    "EnvComposer",
    "EnvExporter",
    "EnvReference",
    "EnvStrategy",
    "Instance",
    "InstanceEnvError",
    "MessageLoadError",
    "ShellExporter",
    "StagingTask",
    "StrategyResolutionError",
    "choose_strategy",
    "filter_services",
    "shell_quote",
    "translate_env",
]
