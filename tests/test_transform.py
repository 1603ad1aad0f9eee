from __future__ import annotations

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from abi2rs.abi import Declaration, Field, Struct, TypeAlias, Variant  # noqa: E402
from abi2rs.assembler import collapse_blank_lines  # noqa: E402
from abi2rs.config import TransformOptions  # noqa: E402
from abi2rs.core import TOOL_VERSION, MissingDefinitionError, TypeTokenError  # noqa: E402
from abi2rs.naming import identity, pascal_case  # noqa: E402
from abi2rs.registry import BUILTINS, COMPOSITES, DEFAULT_REGISTRY, PARSE_HELPERS, Composite, Registry  # noqa: E402
from abi2rs.transform import transform  # noqa: E402

PASCAL = TransformOptions(type_formatter=pascal_case, indent="    ")


def token_declaration() -> Declaration:
    return Declaration(
        version="eosio::abi/1.1",
        types=(TypeAlias("account_name", "name"),),
        variants=(Variant("variant_int_str", ("int32", "string")),),
        structs=(
            Struct(
                name="transfer",
                fields=(
                    Field("from", "account_name"),
                    Field("to", "name"),
                    Field("quantity", "asset"),
                    Field("memo", "string"),
                ),
            ),
            Struct(name="account", fields=(Field("balance", "extended_asset"), Field("owner", "name"))),
            Struct(
                name="stats",
                fields=(
                    Field("supply", "uint64"),
                    Field("burned", "int64$"),
                    Field("hashes", "checksum256[]"),
                ),
            ),
        ),
    )


class TransformTests(unittest.TestCase):
    def test_golden_output(self) -> None:
        declaration = Declaration(
            version="eosio::abi/1.1",
            structs=(Struct(name="transfer", fields=(Field("from", "name"), Field("amount", "uint64"))),),
        )
        expected = f"""// Generated by abi2rs {TOOL_VERSION} - eosio::abi/1.1

use serde::{{Deserialize, Deserializer, Serialize}};

type Name = String;
type Uint64 = u64;

fn str_or_u64<'de, D>(deserializer: D) -> Result<u64, D::Error>
where
    D: Deserializer<'de>,
{{
    #[derive(Deserialize)]
    #[serde(untagged)]
    enum StrOrU64<'a> {{
        Str(&'a str),
        U64(u64),
    }}

    Ok(match StrOrU64::deserialize(deserializer)? {{
        StrOrU64::Str(v) => v
            .parse::<u64>()
            .map_err(|_| serde::de::Error::custom("failed to parse u64 number"))?,
        StrOrU64::U64(v) => v,
    }})
}}

macro_rules! impl_try_from_str {{
    ($type:ty) => {{
        impl TryFrom<&str> for $type {{
            type Error = serde_json::Error;
            #[inline]
            fn try_from(str: &str) -> Result<Self, Self::Error> {{
                serde_json::from_str(str)
            }}
        }}
    }};
}}

#[derive(Serialize, Deserialize, Debug, PartialEq, Eq)]
#[serde(deny_unknown_fields)]
pub struct Transfer {{
    pub from: Name,
    #[serde(deserialize_with = "str_or_u64")]
    pub amount: Uint64,
}}
impl_try_from_str!(Transfer);
"""
        self.assertEqual(transform(declaration, PASCAL).render(), expected)

    def test_no_alias_when_native_matches_formatted_name(self) -> None:
        flags = Declaration(structs=(Struct(name="flags", fields=(Field("on", "bool"), Field("off", "bool?"))),))
        lines = transform(flags, TransformOptions(type_formatter=identity)).lines
        self.assertFalse([line for line in lines if line.startswith("type ")])
        self.assertIn("    pub off: Option<bool>,", lines)

        declaration = Declaration(
            structs=(Struct(name="flags", fields=(Field("on", "bool"), Field("label", "string"))),)
        )
        pascal_lines = transform(declaration, PASCAL).lines
        self.assertIn("type Bool = bool;", pascal_lines)
        self.assertNotIn("type String = String;", pascal_lines)

    def test_alias_emitted_once_regardless_of_reference_count(self) -> None:
        lines = transform(token_declaration(), PASCAL).lines
        self.assertEqual(lines.count("type Name = String;"), 1)
        first_struct = lines.index("pub struct Transfer {")
        self.assertLess(lines.index("type Name = String;"), first_struct)

    def test_nullable_uint64_field(self) -> None:
        lines = transform(token_declaration(), PASCAL).lines
        self.assertIn("    pub burned: Option<Int64>,", lines)
        self.assertIn('    #[serde(default, deserialize_with = "str_or_i64_opt")]', lines)
        self.assertIn("type Int64 = i64;", lines)
        self.assertIn("fn str_or_i64<'de, D>(deserializer: D) -> Result<i64, D::Error>", lines)
        self.assertIn("fn str_or_i64_opt<'de, D>(deserializer: D) -> Result<Option<i64>, D::Error>", lines)

        declaration = Declaration(structs=(Struct(name="row", fields=(Field("id", "uint64$"),)),))
        row_lines = transform(declaration, PASCAL).lines
        self.assertIn("    pub id: Option<Uint64>,", row_lines)
        self.assertIn('    #[serde(default, deserialize_with = "str_or_u64_opt")]', row_lines)
        self.assertIn("type Uint64 = u64;", row_lines)

    def test_checksum_sequence_is_textual(self) -> None:
        lines = transform(token_declaration(), PASCAL).lines
        self.assertIn("    pub hashes: Vec<Checksum256>,", lines)
        self.assertIn("type Checksum256 = String;", lines)
        self.assertFalse([line for line in lines if "u8" in line and "Checksum256" in line])

    def test_composite_definition_and_dependencies(self) -> None:
        lines = transform(token_declaration(), PASCAL).lines
        self.assertEqual(lines.count("pub struct ExtendedAsset {"), 1)
        definition = lines.index("pub struct ExtendedAsset {")
        self.assertEqual(
            list(lines[definition - 2 : definition + 4]),
            [
                "#[derive(Serialize, Deserialize, Debug, PartialEq, Eq)]",
                "#[serde(deny_unknown_fields)]",
                "pub struct ExtendedAsset {",
                "    pub quantity: Asset,",
                "    pub contract: Name,",
                "}",
            ],
        )
        self.assertLess(definition, lines.index("pub struct Account {"))

    def test_composite_pulls_in_builtin_aliases(self) -> None:
        declaration = Declaration(structs=(Struct(name="holding", fields=(Field("value", "extended_asset"),)),))
        lines = transform(declaration, PASCAL).lines
        self.assertIn("type Asset = String;", lines)
        self.assertIn("type Name = String;", lines)

    def test_composite_alias_for_other_formatters(self) -> None:
        declaration = Declaration(structs=(Struct(name="holding", fields=(Field("value", "extended_asset"),)),))
        lines = transform(declaration, TransformOptions(type_formatter=identity)).lines
        self.assertIn("type extended_asset = ExtendedAsset;", lines)
        self.assertIn("    pub quantity: asset,", lines)
        self.assertIn("type asset = String;", lines)

    def test_support_blocks_follow_registry_order(self) -> None:
        lines = transform(token_declaration(), PASCAL).lines
        aliases = [line for line in lines if line.startswith("type ") and "= Name;" not in line]
        self.assertEqual(
            aliases,
            [
                "type Asset = String;",
                "type Name = String;",
                "type Checksum256 = String;",
                "type Int64 = i64;",
                "type Uint64 = u64;",
            ],
        )
        i64_helper = lines.index("fn str_or_i64<'de, D>(deserializer: D) -> Result<i64, D::Error>")
        u64_helper = lines.index("fn str_or_u64<'de, D>(deserializer: D) -> Result<u64, D::Error>")
        composite = lines.index("pub struct ExtendedAsset {")
        macro = lines.index("macro_rules! impl_try_from_str {")
        self.assertLess(lines.index("type Uint64 = u64;"), composite)
        self.assertLess(composite, i64_helper)
        self.assertLess(i64_helper, u64_helper)
        self.assertLess(u64_helper, macro)
        self.assertLess(macro, lines.index("type AccountName = Name;"))

    def test_unsupported_constructs_are_reported(self) -> None:
        declaration = Declaration(
            variants=(Variant("choice", ("uint8", "string")),),
            structs=(
                Struct(name="child", base="parent", fields=(Field("x", "uint8"),)),
                Struct(name="after", fields=(Field("y", "uint16"),)),
            ),
        )
        result = transform(declaration, PASCAL)
        self.assertEqual([d.subject for d in result.diagnostics], ["choice", "child"])
        self.assertNotIn("pub struct Child {", result.lines)
        self.assertFalse([line for line in result.lines if "Uint8" in line])
        after = result.lines.index("pub struct After {")
        self.assertEqual(result.lines[after + 1 : after + 4], ("    pub y: Uint16,", "}", "impl_try_from_str!(After);"))

    def test_output_is_deterministic(self) -> None:
        first = transform(token_declaration(), PASCAL)
        second = transform(token_declaration(), PASCAL)
        self.assertEqual(first.render(), second.render())
        self.assertEqual(first.diagnostics, second.diagnostics)

    def test_missing_composite_definition_aborts(self) -> None:
        registry = Registry(
            builtins=BUILTINS,
            composites=(*COMPOSITES, Composite("pair", "Pair")),
            parse_helpers=PARSE_HELPERS,
        )
        declaration = Declaration(structs=(Struct(name="holder", fields=(Field("p", "pair[]"),)),))
        with self.assertRaises(MissingDefinitionError) as ctx:
            transform(declaration, PASCAL, registry=registry)
        self.assertEqual(ctx.exception.type_name, "pair")
        self.assertIn("pair", str(ctx.exception))

    def test_unused_composite_without_definition_is_fine(self) -> None:
        registry = Registry(builtins=BUILTINS, composites=(Composite("pair", "Pair"),), parse_helpers=PARSE_HELPERS)
        result = transform(Declaration(structs=(Struct(name="empty"),)), PASCAL, registry=registry)
        self.assertIn("pub struct Empty {", result.lines)

    def test_malformed_type_token_aborts(self) -> None:
        declaration = Declaration(structs=(Struct(name="bad", fields=(Field("x", "uint64[3]"),)),))
        with self.assertRaises(TypeTokenError):
            transform(declaration, PASCAL)

    def test_no_consecutive_blank_lines(self) -> None:
        lines = transform(token_declaration(), PASCAL).lines
        for previous, current in zip(lines, lines[1:]):
            self.assertFalse(previous == "" and current == "")
        self.assertEqual(lines[0], f"// Generated by abi2rs {TOOL_VERSION} - eosio::abi/1.1")
        self.assertEqual(lines[2], "use serde::{Deserialize, Deserializer, Serialize};")

    def test_default_registry_is_not_mutated(self) -> None:
        before = (DEFAULT_REGISTRY.builtins, DEFAULT_REGISTRY.composites)
        transform(token_declaration(), PASCAL)
        self.assertEqual((DEFAULT_REGISTRY.builtins, DEFAULT_REGISTRY.composites), before)


def test_collapse_blank_lines() -> None:
    assert collapse_blank_lines(["a", "", "", "", "b", "", ""]) == ["a", "", "b", ""]
    assert collapse_blank_lines([]) == []


if __name__ == "__main__":
    unittest.main()
