from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema

from .common import load_json_object
from .core import AbiFormatError

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "abi.schema.json"


@dataclass(frozen=True)
class TypeAlias:
    new_type_name: str
    type: str


@dataclass(frozen=True)
class Variant:
    name: str
    types: tuple[str, ...]


@dataclass(frozen=True)
class Field:
    name: str
    type: str


@dataclass(frozen=True)
class Struct:
    name: str
    fields: tuple[Field, ...] = ()
    base: str = ""


@dataclass(frozen=True)
class Declaration:
    """Type-level view of an Antelope ABI. Actions, tables and the rest are ignored."""

    version: str = ""
    types: tuple[TypeAlias, ...] = ()
    variants: tuple[Variant, ...] = ()
    structs: tuple[Struct, ...] = ()


def load_schema() -> dict[str, Any]:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def validate_abi_payload(payload: dict[str, Any], label: str = "ABI") -> None:
    try:
        jsonschema.validate(payload, load_schema())
    except jsonschema.ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise AbiFormatError(f"{label} failed schema validation at '{location}': {exc.message}") from exc


def parse_declaration(payload: dict[str, Any], label: str = "ABI") -> Declaration:
    if not isinstance(payload, dict):
        raise AbiFormatError(f"{label} root must be an object")
    validate_abi_payload(payload, label)

    types = tuple(TypeAlias(new_type_name=item["new_type_name"], type=item["type"]) for item in payload.get("types") or [])
    variants = tuple(Variant(name=item["name"], types=tuple(item.get("types") or [])) for item in payload.get("variants") or [])
    structs = tuple(
        Struct(
            name=item["name"],
            base=item.get("base") or "",
            fields=tuple(Field(name=f["name"], type=f["type"]) for f in item.get("fields") or []),
        )
        for item in payload.get("structs") or []
    )
    return Declaration(version=payload.get("version") or "", types=types, variants=variants, structs=structs)


def parse_declaration_text(text: str, label: str = "ABI") -> Declaration:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise AbiFormatError(f"Invalid JSON in {label}: {exc}") from exc
    return parse_declaration(payload, label)


def load_declaration(path: Path) -> Declaration:
    return parse_declaration(load_json_object(path), label=f"ABI '{path}'")
