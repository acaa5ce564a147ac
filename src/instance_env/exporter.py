"""Renderers for exported environment variable lists."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, TypeVar

T_co = TypeVar("T_co", covariant=True)

EnvPairs = Sequence[tuple[str, Any]]

# Characters with special meaning inside a double-quoted shell word.
# Backslash goes first so later escapes are not doubled.
_SHELL_ESCAPES = (("\\", "\\\\"), ('"', '\\"'), ("`", "\\`"), ("$", "\\$"))


class EnvReference(str):
    """A value that refers to other variables (``$PWD/app``).

    Exporters that evaluate their output leave references expanded by
    the consumer; every other value is rendered literally.
    """

    __slots__ = ()


class EnvExporter(Protocol[T_co]):
    """Turns an ordered list of ``(key, value)`` pairs into its final form."""

    def export(self, variables: EnvPairs) -> T_co: ...


def _stringify(value: Any) -> str:
    return "" if value is None else str(value)


def shell_quote(value: Any) -> str:
    """Escape a value for use inside double quotes."""
    text = _stringify(value)
    if isinstance(value, EnvReference):
        return text.replace('"', '\\"')
    for char, replacement in _SHELL_ESCAPES:
        text = text.replace(char, replacement)
    return text


class ShellExporter:
    """Render variables as shell-sourceable ``export`` statements.

    Values are literal after sourcing, whatever quotes, backticks or ``$``
    they carry. Only :class:`EnvReference` values are expanded by the shell.
    """

    def export(self, variables: EnvPairs) -> str:
        return "".join(f'export {key}="{shell_quote(value)}";\n' for key, value in variables)


class DictExporter:
    """Render variables as a mapping; a repeated key keeps its last value."""

    def export(self, variables: EnvPairs) -> dict[str, str]:
        return {key: _stringify(value) for key, value in variables}
