from __future__ import annotations

from dataclasses import dataclass

from .naming import TypeFormatter
from .registry import OPTIONAL_HELPER_SUFFIX, BuiltIn, Composite, Registry
from .type_string import TypeToken, parse_type_token


class UsageTracker:
    """Builtins, composites and parse helpers touched during one transform.

    Backed by plain dicts so iteration follows first use and output stays stable.
    """

    def __init__(self) -> None:
        self._builtins: dict[str, BuiltIn] = {}
        self._composites: dict[str, Composite] = {}
        self._parse_helpers: dict[str, None] = {}

    def mark_builtin(self, builtin: BuiltIn) -> None:
        self._builtins.setdefault(builtin.name, builtin)

    def mark_composite(self, composite: Composite) -> None:
        self._composites.setdefault(composite.name, composite)

    def mark_parse_helper(self, name: str) -> None:
        self._parse_helpers.setdefault(name, None)

    @property
    def builtins(self) -> list[BuiltIn]:
        return list(self._builtins.values())

    @property
    def composites(self) -> list[Composite]:
        return list(self._composites.values())

    @property
    def parse_helpers(self) -> list[str]:
        return list(self._parse_helpers)


@dataclass(frozen=True)
class ResolvedType:
    token: TypeToken
    native: str
    builtin: BuiltIn | None = None
    composite: Composite | None = None

    @property
    def parse_hint(self) -> str | None:
        # Sequences deserialize element-wise through serde's own impls.
        if self.builtin is None or self.token.is_array:
            return None
        return self.builtin.parse_hint

    @property
    def field_parse_helper(self) -> str | None:
        hint = self.parse_hint
        if hint is None:
            return None
        return hint + OPTIONAL_HELPER_SUFFIX if self.token.wrapped else hint

    def render(self) -> str:
        return f"Option<{self.native}>" if self.token.wrapped else self.native


class TypeResolver:
    def __init__(self, registry: Registry, formatter: TypeFormatter, usage: UsageTracker) -> None:
        self.registry = registry
        self.formatter = formatter
        self.usage = usage

    def format_name(self, name: str) -> str:
        return self.formatter(name)

    def resolve(self, token: str) -> ResolvedType:
        parsed = parse_type_token(token)

        builtin = self.registry.find_builtin(parsed.base)
        if builtin is not None:
            self.usage.mark_builtin(builtin)
        composite = self.registry.find_composite(parsed.base)
        if composite is not None:
            self.usage.mark_composite(composite)

        formatted = self.formatter(parsed.base)
        native = f"Vec<{formatted}>" if parsed.is_array else formatted
        return ResolvedType(token=parsed, native=native, builtin=builtin, composite=composite)

    def resolve_type(self, token: str) -> str:
        return self.resolve(token).native
