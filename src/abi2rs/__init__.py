from .abi import Declaration, Field, Struct, TypeAlias, Variant, load_declaration, parse_declaration
from .config import TransformOptions, resolve_options
from .core import (
    TOOL_VERSION,
    Abi2RsError,
    AbiFormatError,
    ConfigError,
    MissingDefinitionError,
    TypeTokenError,
)
from .emitter import Diagnostic
from .naming import TYPE_FORMATTERS, escape_field_name, pascal_case, snake_case
from .registry import DEFAULT_REGISTRY, BuiltIn, Composite, Registry
from .resolver import ResolvedType, TypeResolver, UsageTracker
from .transform import TransformResult, transform
from .type_string import TypeToken, parse_type_token, resolve_modifiers

__all__ = [
    "Abi2RsError",
    "AbiFormatError",
    "BuiltIn",
    "Composite",
    "ConfigError",
    "DEFAULT_REGISTRY",
    "Declaration",
    "Diagnostic",
    "Field",
    "MissingDefinitionError",
    "Registry",
    "ResolvedType",
    "Struct",
    "TOOL_VERSION",
    "TYPE_FORMATTERS",
    "TransformOptions",
    "TransformResult",
    "TypeAlias",
    "TypeResolver",
    "TypeToken",
    "TypeTokenError",
    "UsageTracker",
    "Variant",
    "escape_field_name",
    "load_declaration",
    "parse_declaration",
    "parse_type_token",
    "pascal_case",
    "resolve_modifiers",
    "resolve_options",
    "snake_case",
    "transform",
]
