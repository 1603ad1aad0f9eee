from __future__ import annotations

import re
from dataclasses import dataclass

from .core import TypeTokenError

OPTIONAL_MARKER = "?"
NULLABLE_MARKER = "$"
ARRAY_MARKER = "[]"

ABI_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


@dataclass(frozen=True)
class Modifiers:
    name: str
    optional: bool
    nullable: bool


@dataclass(frozen=True)
class TypeToken:
    """A parsed ABI type token such as ``uint64[]$?``.

    Markers are read right to left: optional ``?``, then nullable ``$``, then the
    sequence marker ``[]``. What is left must be a plain ABI identifier.
    """

    raw: str
    base: str
    optional: bool = False
    nullable: bool = False
    is_array: bool = False

    @property
    def wrapped(self) -> bool:
        return self.optional or self.nullable


def resolve_modifiers(token: str) -> Modifiers:
    name = token
    optional = False
    nullable = False
    if name.endswith(OPTIONAL_MARKER):
        optional = True
        name = name[: -len(OPTIONAL_MARKER)]
    if name.endswith(NULLABLE_MARKER):
        nullable = True
        name = name[: -len(NULLABLE_MARKER)]
    return Modifiers(name=name, optional=optional, nullable=nullable)


def parse_type_token(token: str) -> TypeToken:
    if not isinstance(token, str) or not token:
        raise TypeTokenError(str(token), "empty type")

    modifiers = resolve_modifiers(token)
    base = modifiers.name
    is_array = False
    if base.endswith(ARRAY_MARKER):
        is_array = True
        base = base[: -len(ARRAY_MARKER)]

    if not base:
        raise TypeTokenError(token, "missing base type name")
    if not ABI_IDENTIFIER_RE.match(base):
        if base[-1:] in (OPTIONAL_MARKER, NULLABLE_MARKER) or ARRAY_MARKER in base:
            raise TypeTokenError(token, "modifiers are repeated or out of order")
        raise TypeTokenError(token, f"unrecognized characters in base type '{base}'")

    return TypeToken(
        raw=token,
        base=base,
        optional=modifiers.optional,
        nullable=modifiers.nullable,
        is_array=is_array,
    )
