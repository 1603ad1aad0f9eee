from __future__ import annotations

from dataclasses import dataclass, field
from string import Template
from types import MappingProxyType
from typing import Iterable, Mapping

from .core import Abi2RsError


@dataclass(frozen=True)
class BuiltIn:
    name: str
    native: str
    parse_hint: str | None = None


@dataclass(frozen=True)
class Composite:
    """Non-primitive ABI type backed by a hand-written Rust definition.

    ``definition`` is a ``string.Template``: ``${indent}`` expands to the configured
    indentation and every other ``${<abi type>}`` placeholder is resolved like a
    field type, so the builtins it mentions are emitted alongside it.
    """

    name: str
    native: str
    definition: str | None = None

    def references(self) -> list[str]:
        if self.definition is None:
            return []
        return [ident for ident in Template(self.definition).get_identifiers() if ident != "indent"]


STR_OR_U64 = """fn str_or_u64<'de, D>(deserializer: D) -> Result<u64, D::Error>
where
    D: Deserializer<'de>,
{
    #[derive(Deserialize)]
    #[serde(untagged)]
    enum StrOrU64<'a> {
        Str(&'a str),
        U64(u64),
    }

    Ok(match StrOrU64::deserialize(deserializer)? {
        StrOrU64::Str(v) => v
            .parse::<u64>()
            .map_err(|_| serde::de::Error::custom("failed to parse u64 number"))?,
        StrOrU64::U64(v) => v,
    })
}"""

STR_OR_I64 = """fn str_or_i64<'de, D>(deserializer: D) -> Result<i64, D::Error>
where
    D: Deserializer<'de>,
{
    #[derive(Deserialize)]
    #[serde(untagged)]
    enum StrOrI64<'a> {
        Str(&'a str),
        I64(i64),
    }

    Ok(match StrOrI64::deserialize(deserializer)? {
        StrOrI64::Str(v) => v
            .parse::<i64>()
            .map_err(|_| serde::de::Error::custom("failed to parse i64 number"))?,
        StrOrI64::I64(v) => v,
    })
}"""

STR_OR_U64_OPT = """fn str_or_u64_opt<'de, D>(deserializer: D) -> Result<Option<u64>, D::Error>
where
    D: Deserializer<'de>,
{
    #[derive(Deserialize)]
    struct Value(#[serde(deserialize_with = "str_or_u64")] u64);

    Ok(Option::<Value>::deserialize(deserializer)?.map(|Value(v)| v))
}"""

STR_OR_I64_OPT = """fn str_or_i64_opt<'de, D>(deserializer: D) -> Result<Option<i64>, D::Error>
where
    D: Deserializer<'de>,
{
    #[derive(Deserialize)]
    struct Value(#[serde(deserialize_with = "str_or_i64")] i64);

    Ok(Option::<Value>::deserialize(deserializer)?.map(|Value(v)| v))
}"""

# Optional fields use "<hint>_opt", which wraps "<hint>".
OPTIONAL_HELPER_SUFFIX = "_opt"

PARSE_HELPERS = {
    "str_or_u64": STR_OR_U64,
    "str_or_u64_opt": STR_OR_U64_OPT,
    "str_or_i64": STR_OR_I64,
    "str_or_i64_opt": STR_OR_I64_OPT,
}

# Mirrors the builtin table of Antelope's abi_serializer. Order matters: it decides
# where support declarations land in the generated file.
BUILTINS = (
    BuiltIn("asset", "String"),
    BuiltIn("name", "String"),
    BuiltIn("bool", "bool"),
    BuiltIn("string", "String"),
    BuiltIn("bytes", "String"),
    BuiltIn("checksum160", "String"),
    BuiltIn("checksum256", "String"),
    BuiltIn("checksum512", "String"),
    BuiltIn("public_key", "String"),
    BuiltIn("signature", "String"),
    BuiltIn("symbol", "String"),
    BuiltIn("symbol_code", "String"),
    BuiltIn("time_point", "String"),
    BuiltIn("time_point_sec", "String"),
    BuiltIn("block_timestamp_type", "String"),
    BuiltIn("int8", "i8"),
    BuiltIn("int16", "i16"),
    BuiltIn("int32", "i32"),
    BuiltIn("varint32", "i32"),
    BuiltIn("int64", "i64", parse_hint="str_or_i64"),
    BuiltIn("int128", "String"),
    BuiltIn("uint8", "u8"),
    BuiltIn("uint16", "u16"),
    BuiltIn("uint32", "u32"),
    BuiltIn("varuint32", "u32"),
    BuiltIn("uint64", "u64", parse_hint="str_or_u64"),
    BuiltIn("uint128", "String"),
    BuiltIn("float32", "String"),
    BuiltIn("float64", "String"),
    BuiltIn("float128", "String"),
)

COMPOSITES = (
    Composite(
        "extended_asset",
        "ExtendedAsset",
        definition="pub struct ExtendedAsset {\n${indent}pub quantity: ${asset},\n${indent}pub contract: ${name},\n}",
    ),
)


def _index_by_name(items: Iterable[BuiltIn | Composite], label: str) -> Mapping[str, int]:
    index: dict[str, int] = {}
    for position, item in enumerate(items):
        if item.name in index:
            raise Abi2RsError(f"Duplicate {label} '{item.name}' in registry")
        index[item.name] = position
    return MappingProxyType(index)


@dataclass(frozen=True, eq=False)
class Registry:
    builtins: tuple[BuiltIn, ...]
    composites: tuple[Composite, ...]
    parse_helpers: Mapping[str, str]
    _builtin_index: Mapping[str, int] = field(init=False, repr=False)
    _composite_index: Mapping[str, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "builtins", tuple(self.builtins))
        object.__setattr__(self, "composites", tuple(self.composites))
        object.__setattr__(self, "parse_helpers", MappingProxyType(dict(self.parse_helpers)))
        object.__setattr__(self, "_builtin_index", _index_by_name(self.builtins, "builtin"))
        object.__setattr__(self, "_composite_index", _index_by_name(self.composites, "composite"))
        for builtin in self.builtins:
            if not builtin.parse_hint:
                continue
            for helper in (builtin.parse_hint, builtin.parse_hint + OPTIONAL_HELPER_SUFFIX):
                if helper not in self.parse_helpers:
                    raise Abi2RsError(f"Builtin '{builtin.name}' refers to unknown parse helper '{helper}'")

    def find_builtin(self, name: str) -> BuiltIn | None:
        position = self._builtin_index.get(name)
        return None if position is None else self.builtins[position]

    def find_composite(self, name: str) -> Composite | None:
        position = self._composite_index.get(name)
        return None if position is None else self.composites[position]

    def builtin_index(self, builtin: BuiltIn) -> int:
        return self._builtin_index[builtin.name]

    def composite_index(self, composite: Composite) -> int:
        return self._composite_index[composite.name]

    def parse_helper(self, hint: str) -> str:
        return self.parse_helpers[hint]


DEFAULT_REGISTRY = Registry(builtins=BUILTINS, composites=COMPOSITES, parse_helpers=PARSE_HELPERS)
