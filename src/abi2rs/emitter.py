from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .abi import Field, Struct, TypeAlias, Variant
from .naming import escape_field_name
from .resolver import TypeResolver

STRUCT_ATTRIBUTES = (
    "#[derive(Serialize, Deserialize, Debug, PartialEq, Eq)]",
    "#[serde(deny_unknown_fields)]",
)

TRY_FROM_STR_MACRO = """macro_rules! impl_try_from_str {
    ($type:ty) => {
        impl TryFrom<&str> for $type {
            type Error = serde_json::Error;
            #[inline]
            fn try_from(str: &str) -> Result<Self, Self::Error> {
                serde_json::from_str(str)
            }
        }
    };
}"""

TEMPLATE_INDENT = "    "


@dataclass(frozen=True)
class Diagnostic:
    kind: str
    subject: str
    message: str

    def __str__(self) -> str:
        return self.message


def block_lines(text: str, indent: str) -> list[str]:
    """Split a block written with four-space indentation into lines using ``indent``."""
    lines: list[str] = []
    for line in text.splitlines():
        stripped = line.lstrip(" ")
        depth, remainder = divmod(len(line) - len(stripped), len(TEMPLATE_INDENT))
        lines.append(indent * depth + " " * remainder + stripped)
    return lines


def try_from_str_call(native_name: str) -> str:
    return f"impl_try_from_str!({native_name});"


class Emitter:
    def __init__(self, resolver: TypeResolver, indent: str) -> None:
        self.resolver = resolver
        self.indent = indent
        self.diagnostics: list[Diagnostic] = []
        self._declared: set[str] = set()

    def _skip(self, kind: str, subject: str, message: str) -> None:
        self.diagnostics.append(Diagnostic(kind=kind, subject=subject, message=message))

    def _claim(self, name: str, construct: str) -> bool:
        if name in self._declared:
            self._skip("duplicate", name, f"Duplicate {construct} '{name}', skipping")
            return False
        self._declared.add(name)
        return True

    def macro_lines(self) -> list[str]:
        return block_lines(TRY_FROM_STR_MACRO, self.indent)

    def emit_alias(self, alias: TypeAlias) -> list[str]:
        if not self._claim(alias.new_type_name, "type"):
            return []
        native_name = self.resolver.format_name(alias.new_type_name)
        target = self.resolver.resolve(alias.type).render()
        if target == native_name:
            self._skip("self_alias", alias.new_type_name, f"Type {alias.new_type_name} aliases itself, skipping")
            return []
        return [f"type {native_name} = {target};"]

    def emit_aliases(self, aliases: Iterable[TypeAlias]) -> list[str]:
        lines: list[str] = []
        for alias in aliases:
            lines.extend(self.emit_alias(alias))
        return lines

    def emit_variants(self, variants: Iterable[Variant]) -> list[str]:
        for variant in variants:
            self._skip("variant", variant.name, f"Variants are not supported, skipping {variant.name}")
        return []

    def emit_field(self, field: Field) -> list[str]:
        resolved = self.resolver.resolve(field.type)
        ident, rename = escape_field_name(field.name)

        serde_args: list[str] = []
        if rename is not None:
            serde_args.append(f'rename = "{rename}"')
        helper = resolved.field_parse_helper
        if helper is not None:
            self.resolver.usage.mark_parse_helper(helper)
            if resolved.token.wrapped:
                serde_args.append("default")
            serde_args.append(f'deserialize_with = "{helper}"')

        lines: list[str] = []
        if serde_args:
            lines.append(f"{self.indent}#[serde({', '.join(serde_args)})]")
        lines.append(f"{self.indent}pub {ident}: {resolved.render()},")
        return lines

    def emit_struct(self, struct: Struct) -> list[str]:
        if struct.base:
            self._skip(
                "base",
                struct.name,
                f"Struct inheritance is not supported, skipping {struct.name} with base {struct.base}",
            )
            return []
        if not self._claim(struct.name, "struct"):
            return []

        native_name = self.resolver.format_name(struct.name)
        lines = list(STRUCT_ATTRIBUTES)
        lines.append(f"pub struct {native_name} {{")
        for field in struct.fields:
            lines.extend(self.emit_field(field))
        lines.append("}")
        lines.append(try_from_str_call(native_name))
        lines.append("")
        return lines

    def emit_structs(self, structs: Iterable[Struct]) -> list[str]:
        lines: list[str] = []
        for struct in structs:
            lines.extend(self.emit_struct(struct))
        return lines
