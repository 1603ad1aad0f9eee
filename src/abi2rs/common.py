from __future__ import annotations

import difflib
import json
from pathlib import Path
from typing import Any

from .core import Abi2RsError


def load_json_object(path: Path) -> dict[str, Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise Abi2RsError(f"Unable to read JSON file '{path}': {exc}") from exc
    except json.JSONDecodeError as exc:
        raise Abi2RsError(f"Invalid JSON in '{path}': {exc}") from exc
    if not isinstance(payload, dict):
        raise Abi2RsError(f"JSON root in '{path}' must be an object")
    return payload


def write_if_changed(path: Path, content: str, check: bool, dry_run: bool) -> str:
    """Write generated output and report one of: unchanged, drift, would-write, written."""
    existing = path.read_text(encoding="utf-8") if path.exists() else ""
    if existing == content:
        return "unchanged"
    if check:
        diff = difflib.unified_diff(
            existing.splitlines(),
            content.splitlines(),
            fromfile=f"a/{path}",
            tofile=f"b/{path}",
            lineterm="",
        )
        print("\n".join(diff))
        return "drift"
    if dry_run:
        return "would-write"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return "written"
