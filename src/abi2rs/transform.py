from __future__ import annotations

from dataclasses import dataclass

from .abi import Declaration
from .assembler import Assembler
from .config import TransformOptions
from .emitter import Diagnostic, Emitter
from .registry import DEFAULT_REGISTRY, Registry
from .resolver import TypeResolver, UsageTracker


@dataclass(frozen=True)
class TransformResult:
    lines: tuple[str, ...]
    diagnostics: tuple[Diagnostic, ...]

    def render(self) -> str:
        content = "\n".join(self.lines)
        if not content.endswith("\n"):
            content += "\n"
        return content


def transform(
    declaration: Declaration,
    options: TransformOptions,
    registry: Registry = DEFAULT_REGISTRY,
) -> TransformResult:
    """Translate the type section of an ABI into serde-annotated Rust declarations.

    Unsupported constructs (variants, structs with a base) are skipped and reported
    in ``diagnostics``. Raises ``MissingDefinitionError`` when a referenced composite
    has no definition and ``TypeTokenError`` for malformed type strings; no output is
    produced in either case.
    """
    usage = UsageTracker()
    resolver = TypeResolver(registry, options.type_formatter, usage)
    emitter = Emitter(resolver, options.indent)

    body: list[str] = ["", *emitter.macro_lines()]
    body.extend(emitter.emit_aliases(declaration.types))
    body.append("")
    body.extend(emitter.emit_variants(declaration.variants))
    body.append("")
    body.extend(emitter.emit_structs(declaration.structs))
    body.append("")

    lines = Assembler(resolver, options.indent).assemble(body, declaration.version)
    return TransformResult(lines=tuple(lines), diagnostics=tuple(emitter.diagnostics))
