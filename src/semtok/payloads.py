"""Convert semantic token payloads to and from their JSON wire shape.

Wire shapes (camelCase, as sent over the protocol)::

    {"resultId": "7", "data": [0, 0, 3, 1, 0]}
    {"resultId": "8", "edits": [{"start": 5, "deleteCount": 5, "data": [...]}]}
"""
from __future__ import annotations

from typing import Any

from semtok.errors import MalformedEdits, MalformedStream
from semtok.types import Range, SemanticTokens, SemanticTokensDelta, TokenEdit


def _result_id(payload: dict[str, Any]) -> str | None:
    value = payload.get("resultId")
    return None if value is None else str(value)


def is_full_payload(payload: dict[str, Any]) -> bool:
    """A payload carrying ``data`` is a full transmission; ``edits`` a delta."""
    return payload.get("data") is not None


def tokens_from_dict(payload: dict[str, Any]) -> SemanticTokens:
    data = payload.get("data")
    if not isinstance(data, list):
        raise MalformedStream("semantic tokens payload needs a 'data' list")
    return SemanticTokens.of(_result_id(payload), data)


def edit_from_dict(payload: dict[str, Any]) -> TokenEdit:
    """Build one TokenEdit; any malformed field raises MalformedEdits."""
    try:
        start = int(payload["start"])
        delete_count = int(payload["deleteCount"])
        data = tuple(int(v) for v in payload.get("data") or ())
    except KeyError as exc:
        raise MalformedEdits(f"semantic tokens edit is missing {exc}") from exc
    except (TypeError, ValueError, AttributeError) as exc:
        raise MalformedEdits(f"semantic tokens edit is malformed: {exc}") from exc
    return TokenEdit(start=start, delete_count=delete_count, data=data)


def delta_from_dict(payload: dict[str, Any]) -> SemanticTokensDelta:
    edits = payload.get("edits")
    if not isinstance(edits, list):
        raise MalformedEdits("semantic tokens delta needs an 'edits' list")
    return SemanticTokensDelta(
        result_id=_result_id(payload),
        edits=tuple(edit_from_dict(edit) for edit in edits),
    )


def payload_from_dict(payload: dict[str, Any]) -> SemanticTokens | SemanticTokensDelta:
    if is_full_payload(payload):
        return tokens_from_dict(payload)
    return delta_from_dict(payload)


def tokens_to_dict(tokens: SemanticTokens) -> dict[str, Any]:
    out: dict[str, Any] = {"data": tokens.data.tolist()}
    if tokens.result_id is not None:
        out["resultId"] = tokens.result_id
    return out


def delta_to_dict(delta: SemanticTokensDelta) -> dict[str, Any]:
    edits: list[dict[str, Any]] = []
    for edit in delta.edits:
        row: dict[str, Any] = {"start": edit.start, "deleteCount": edit.delete_count}
        if edit.data:
            row["data"] = list(edit.data)
        edits.append(row)
    out: dict[str, Any] = {"edits": edits}
    if delta.result_id is not None:
        out["resultId"] = delta.result_id
    return out


def range_to_dict(rng: Range) -> dict[str, Any]:
    return {
        "start": {"line": rng.start.line, "character": rng.start.character},
        "end": {"line": rng.end.line, "character": rng.end.character},
    }
