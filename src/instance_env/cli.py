"""CLI for rendering instance environments from an application message."""

import json
from enum import Enum
from pathlib import Path
from typing import Any, NoReturn

import structlog
import typer
import yaml
from pydantic import ValidationError
from rich.console import Console

from instance_env.composer import EnvComposer
from instance_env.config import settings
from instance_env.errors import InstanceEnvError, MessageLoadError
from instance_env.exporter import DictExporter, ShellExporter
from instance_env.logging import configure_logging
from instance_env.models import AppMessage, Instance, StagingTask

app = typer.Typer(
    name="instance-env",
    help="Compose the environment injected into application instances",
    no_args_is_help=True,
)
console = Console(stderr=True)
log = structlog.get_logger()

CORAL = "#ff6ac1"


class ContextKind(str, Enum):
    staging = "staging"
    starting = "starting"


class Scope(str, Enum):
    system = "system"
    user = "user"
    all = "all"


class OutputFormat(str, Enum):
    shell = "shell"
    json = "json"


def load_message_file(path: Path) -> dict[str, Any]:
    """Read a YAML or JSON message document.

    The document is either the application message itself or a mapping
    with a ``message`` key plus optional ``staging`` / ``instance`` sections.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise MessageLoadError(
            f"Cannot read message file: {path}", details={"error": str(e)}
        ) from e

    if not isinstance(data, dict):
        raise MessageLoadError(f"Message file must contain a mapping: {path}")
    if "message" not in data:
        data = {"message": data}
    return data


def build_composer(
    document: dict[str, Any],
    context: ContextKind,
    output: OutputFormat,
) -> EnvComposer[Any]:
    """Build a composer for the chosen context from a loaded document."""
    try:
        message = AppMessage.from_mapping(document["message"] or {})
    except ValidationError as e:
        raise MessageLoadError("Invalid application message", details={"error": str(e)}) from e

    handle: Instance | StagingTask
    try:
        if context is ContextKind.staging:
            handle = StagingTask(**{"task_id": "staging", **(document.get("staging") or {})})
        else:
            handle = Instance(**{"instance_id": "instance", **(document.get("instance") or {})})
    except TypeError as e:
        raise MessageLoadError(f"Invalid {context.value} section", details={"error": str(e)}) from e

    exporter = DictExporter() if output is OutputFormat.json else ShellExporter()
    return EnvComposer(message, handle, exporter=exporter)


def _fail(error: InstanceEnvError) -> NoReturn:
    console.print(f"[{CORAL}]Error:[/] {error.message}")
    for key, value in error.details.items():
        console.print(f"  {key}: {value}", markup=False)
    raise typer.Exit(1)


@app.callback()
def main_callback(
    log_level: str = typer.Option(None, "--log-level", help="Logging level (overrides config)"),
) -> None:
    configure_logging(log_level or settings.log_level)


@app.command()
def render(
    message_file: Path = typer.Argument(..., help="YAML/JSON application message"),
    context: ContextKind = typer.Option(
        ContextKind.starting, "--context", "-c", help="Staging task or running instance"
    ),
    scope: Scope = typer.Option(Scope.all, "--scope", "-s", help="Which variables to export"),
    output: OutputFormat = typer.Option(OutputFormat.shell, "--format", "-f", help="Output format"),
) -> None:
    """Render exported environment variables for a message."""
    try:
        composer = build_composer(load_message_file(message_file), context, output)
        if scope is Scope.system:
            result = composer.exported_system_environment_variables()
        elif scope is Scope.user:
            result = composer.exported_user_environment_variables()
        else:
            result = composer.exported_environment_variables()
    except InstanceEnvError as e:
        log.warning("render_failed", error_type=type(e).__name__, error_message=e.message)
        _fail(e)

    if output is OutputFormat.json:
        typer.echo(json.dumps(result, indent=2))
    else:
        typer.echo(result, nl=False)


@app.command()
def services(
    message_file: Path = typer.Argument(..., help="YAML/JSON application message"),
) -> None:
    """Show the filtered VCAP_SERVICES grouping for a message."""
    try:
        composer = build_composer(
            load_message_file(message_file), ContextKind.starting, OutputFormat.json
        )
    except InstanceEnvError as e:
        _fail(e)

    typer.echo(json.dumps(composer.vcap_services, indent=2))


def main() -> None:
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
