from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .abi import Declaration, load_declaration, parse_declaration_text
from .common import write_if_changed
from .config import load_config, resolve_options
from .core import TOOL_VERSION, Abi2RsError
from .naming import TYPE_FORMATTERS
from .transform import transform


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="abi2rs",
        description="Generate serde-annotated Rust types from an Antelope ABI.",
    )
    parser.add_argument("abi", help="Path to ABI JSON ('-' reads stdin).")
    parser.add_argument("--config", help="Path to generator config JSON.")
    parser.add_argument("--out", "-o", help="Write generated Rust to path (default: stdout).")
    indent = parser.add_mutually_exclusive_group()
    indent.add_argument("--indent", type=int, help="Spaces per indentation level (default: 4).")
    indent.add_argument("--tabs", action="store_true", help="Indent with tabs.")
    parser.add_argument(
        "--type-format",
        choices=sorted(TYPE_FORMATTERS),
        help="Naming convention for type names (default: pascal).",
    )
    parser.add_argument("--check", action="store_true", help="Fail if --out is missing or stale.")
    parser.add_argument("--dry-run", action="store_true", help="Generate without writing anything.")
    parser.add_argument("--fail-on-warnings", action="store_true", help="Exit 1 when constructs were skipped.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {TOOL_VERSION}")
    return parser


def read_declaration(source: str) -> Declaration:
    if source == "-":
        return parse_declaration_text(sys.stdin.read(), label="ABI from stdin")
    return load_declaration(Path(source).resolve())


def run(args: argparse.Namespace) -> int:
    if args.check and not args.out:
        raise Abi2RsError("--check requires --out.")

    config = load_config(Path(args.config).resolve()) if args.config else {}
    indent = "\t" if args.tabs else args.indent
    options = resolve_options(config, indent=indent, type_format=args.type_format)

    declaration = read_declaration(args.abi)
    result = transform(declaration, options)
    for diagnostic in result.diagnostics:
        print(f"warning: {diagnostic.message}", file=sys.stderr)

    content = result.render()
    exit_code = 0
    if args.out:
        status = write_if_changed(Path(args.out), content, check=args.check, dry_run=args.dry_run)
        print(f"abi2rs: {args.out}: {status}", file=sys.stderr)
        if status == "drift":
            exit_code = 1
    elif not args.dry_run:
        sys.stdout.write(content)

    if args.fail_on_warnings and result.diagnostics:
        exit_code = 1
    return exit_code


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return run(args)
    except Abi2RsError as exc:
        print(f"abi2rs error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
