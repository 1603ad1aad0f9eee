from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .common import load_json_object
from .core import ConfigError
from .naming import TYPE_FORMATTERS, TypeFormatter, pascal_case

DEFAULT_INDENT = "    "
DEFAULT_TYPE_FORMAT = "pascal"
CONFIG_KEYS = ("indent", "type_format")


@dataclass(frozen=True)
class TransformOptions:
    # Applied to every alias, struct and composite name so lookups and declarations agree.
    type_formatter: TypeFormatter = pascal_case
    indent: str = DEFAULT_INDENT


def resolve_indent(value: Any, label: str = "indent") -> str:
    if isinstance(value, bool):
        raise ConfigError(f"{label} must be a positive integer or a whitespace string")
    if isinstance(value, int):
        if value < 1:
            raise ConfigError(f"{label} must be a positive integer, got {value}")
        return " " * value
    if isinstance(value, str) and value and not value.strip(" \t"):
        return value
    raise ConfigError(f"{label} must be a positive integer or a whitespace string")


def resolve_type_formatter(name: Any, label: str = "type_format") -> TypeFormatter:
    if not isinstance(name, str) or name not in TYPE_FORMATTERS:
        known = ", ".join(sorted(TYPE_FORMATTERS))
        raise ConfigError(f"{label} must be one of: {known}")
    return TYPE_FORMATTERS[name]


def load_config(path: Path) -> dict[str, Any]:
    raw = load_json_object(path)
    unknown = sorted(key for key in raw if key not in CONFIG_KEYS)
    if unknown:
        raise ConfigError(f"config '{path}' has unknown keys: {', '.join(unknown)}")
    return raw


def resolve_options(
    config: dict[str, Any] | None = None,
    indent: Any = None,
    type_format: str | None = None,
) -> TransformOptions:
    """Merge config file values with command line overrides; overrides win."""
    config = config or {}
    indent_value = indent if indent is not None else config.get("indent")
    format_value = type_format if type_format is not None else config.get("type_format", DEFAULT_TYPE_FORMAT)
    return TransformOptions(
        type_formatter=resolve_type_formatter(format_value),
        indent=DEFAULT_INDENT if indent_value is None else resolve_indent(indent_value),
    )
