from __future__ import annotations

from string import Template

from .core import TOOL_VERSION, MissingDefinitionError
from .emitter import STRUCT_ATTRIBUTES, TEMPLATE_INDENT, block_lines
from .registry import OPTIONAL_HELPER_SUFFIX, Composite, Registry
from .resolver import TypeResolver, UsageTracker

IMPORTS = "use serde::{Deserialize, Deserializer, Serialize};"


def header_line(abi_version: str) -> str:
    return f"// Generated by abi2rs {TOOL_VERSION} - {abi_version}"


def collapse_blank_lines(lines: list[str]) -> list[str]:
    out: list[str] = []
    for line in lines:
        if line == "" and out and out[-1] == "":
            continue
        out.append(line)
    return out


class Assembler:
    """Prepends support declarations for everything the emitted body touched.

    Each group is walked in descending registry order and inserted at the front, so
    the finished file lists it in ascending registry order.
    """

    def __init__(self, resolver: TypeResolver, indent: str) -> None:
        self.resolver = resolver
        self.indent = indent

    @property
    def registry(self) -> Registry:
        return self.resolver.registry

    @property
    def usage(self) -> UsageTracker:
        return self.resolver.usage

    def render_composite(self, composite: Composite) -> list[str]:
        if composite.definition is None:
            raise MissingDefinitionError(composite.name)
        values = {name: self.resolver.resolve_type(name) for name in composite.references()}
        values["indent"] = TEMPLATE_INDENT
        lines = list(STRUCT_ATTRIBUTES)
        lines.extend(block_lines(Template(composite.definition).substitute(values), self.indent))
        formatted = self.resolver.format_name(composite.name)
        if formatted != composite.native:
            lines.append(f"type {formatted} = {composite.native};")
        return lines

    def render_composites(self) -> dict[str, list[str]]:
        # Definitions may reference further composites; the usage list grows while we walk it.
        rendered: dict[str, list[str]] = {}
        position = 0
        while position < len(self.usage.composites):
            composite = self.usage.composites[position]
            rendered[composite.name] = self.render_composite(composite)
            position += 1
        return rendered

    def parse_helper_lines(self, hint: str, emitted: set[str]) -> list[str]:
        lines: list[str] = []
        used = set(self.usage.parse_helpers)
        for helper in (hint, hint + OPTIONAL_HELPER_SUFFIX):
            if helper in emitted:
                continue
            if helper != hint and helper not in used:
                continue
            emitted.add(helper)
            lines.append("")
            lines.extend(block_lines(self.registry.parse_helper(helper), self.indent))
        return lines

    def assemble(self, body: list[str], abi_version: str) -> list[str]:
        composite_blocks = self.render_composites()

        builtins = sorted(self.usage.builtins, key=self.registry.builtin_index, reverse=True)
        composites = sorted(self.usage.composites, key=self.registry.composite_index, reverse=True)

        out = list(body)
        emitted_helpers: set[str] = set()
        for builtin in builtins:
            if builtin.parse_hint:
                out[0:0] = self.parse_helper_lines(builtin.parse_hint, emitted_helpers)

        for composite in composites:
            out[0:0] = ["", *composite_blocks[composite.name]]

        out.insert(0, "")

        for builtin in builtins:
            formatted = self.resolver.format_name(builtin.name)
            if formatted != builtin.native:
                out.insert(0, f"type {formatted} = {builtin.native};")

        out[0:0] = [IMPORTS, ""]
        out[0:0] = [header_line(abi_version), ""]
        return collapse_blank_lines(out)
