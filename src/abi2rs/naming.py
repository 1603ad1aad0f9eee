from __future__ import annotations

import re
from typing import Callable

TypeFormatter = Callable[[str], str]

RUST_KEYWORDS = frozenset(
    {
        # strict
        "as", "async", "await", "break", "const", "continue", "crate", "dyn", "else", "enum",
        "extern", "false", "fn", "for", "if", "impl", "in", "let", "loop", "match", "mod",
        "move", "mut", "pub", "ref", "return", "self", "Self", "static", "struct", "super",
        "trait", "true", "type", "unsafe", "use", "where", "while",
        # reserved
        "abstract", "become", "box", "do", "final", "gen", "macro", "override", "priv", "try",
        "typeof", "unsized", "virtual", "yield",
    }
)

# r#self and friends are rejected by rustc.
NON_RAW_KEYWORDS = frozenset({"self", "Self", "super", "crate"})

RAW_IDENTIFIER_PREFIX = "r#"

_WORD_SPLIT_RE = re.compile(r"[_.]+")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def pascal_case(identifier: str) -> str:
    parts = [p for p in _WORD_SPLIT_RE.split(identifier) if p]
    if not parts:
        return identifier
    return "".join(p[:1].upper() + p[1:] for p in parts)


def snake_case(identifier: str) -> str:
    text = _CAMEL_BOUNDARY_RE.sub("_", identifier)
    return _WORD_SPLIT_RE.sub("_", text).lower()


def identity(identifier: str) -> str:
    return identifier


TYPE_FORMATTERS: dict[str, TypeFormatter] = {
    "pascal": pascal_case,
    "snake": snake_case,
    "identity": identity,
}


def escape_field_name(name: str) -> tuple[str, str | None]:
    """Return the Rust identifier for an ABI field and the serde rename it needs, if any."""
    if name in NON_RAW_KEYWORDS:
        return f"{name}_", name
    if name in RUST_KEYWORDS:
        return f"{RAW_IDENTIFIER_PREFIX}{name}", None
    return name, None
