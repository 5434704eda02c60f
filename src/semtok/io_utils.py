"""orjson-backed JSON and JSONL file helpers."""
from __future__ import annotations

from array import array
from pathlib import Path
from typing import Any, cast

import orjson


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def load_jsonl(path: Path) -> list[dict[str, Any]]:
    """Load a JSON Lines file (one JSON object per line). Blank lines skipped."""
    records: list[dict[str, Any]] = []
    for line in path.read_bytes().split(b"\n"):
        line = line.strip()
        if line:
            records.append(orjson.loads(line))
    return records


def dumps_line(record: Any) -> bytes:
    """Serialize one record as a compact JSON line (no trailing newline)."""
    return orjson.dumps(convert_buffers(record), option=orjson.OPT_SORT_KEYS)


def save_jsonl(records: list[dict[str, Any]], path: Path) -> None:
    """Save a list of dicts as a JSON Lines file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [dumps_line(r) for r in records]
    path.write_bytes(b"\n".join(lines) + b"\n" if lines else b"")


def convert_buffers(obj: Any) -> Any:
    """Recursively convert token buffers and tuples to JSON-native lists."""
    if isinstance(obj, dict):
        obj_dict = cast(dict[Any, Any], obj)
        return {k: convert_buffers(v) for k, v in obj_dict.items()}
    if isinstance(obj, (list, tuple)):
        return [convert_buffers(v) for v in cast(list[Any], obj)]
    if isinstance(obj, array):
        return obj.tolist()
    return obj
