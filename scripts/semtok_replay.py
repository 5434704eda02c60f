#!/usr/bin/env python3
"""Replay a recorded semantic-token session through the inactive-region feature.

Reads a JSON Lines event log and writes one JSON line per forwarded token
payload, decoration call, or rejected transmission.

Event kinds (one object per line):
    {"event": "legend", "token_types": ["comment", "keyword"]}
    {"event": "full", "document": "a.c", "payload": {"resultId": "1", "data": [...]}}
    {"event": "delta", "document": "a.c", "previous_result_id": "1",
     "payload": {"resultId": "2", "edits": [...]}}
    {"event": "visible", "documents": ["a.c"]}
    {"event": "close", "document": "a.c"}

Usage:
    python3 scripts/semtok_replay.py --events session.jsonl
    python3 scripts/semtok_replay.py --events session.jsonl \
      --config feature.json --output replay.jsonl --verbose
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from semtok.config import DecorationStyle, load_feature_config
from semtok.errors import MalformedStream
from semtok.feature import InactiveRegionsFeature
from semtok.io_utils import dumps_line, load_jsonl, save_jsonl
from semtok.payloads import (
    delta_to_dict,
    payload_from_dict,
    range_to_dict,
    tokens_from_dict,
    tokens_to_dict,
)
from semtok.types import Range, SemanticTokens

log = logging.getLogger("semtok_replay")

EXIT_OK = 0
EXIT_MALFORMED = 1
EXIT_USAGE = 2


@dataclass(frozen=True, slots=True)
class ReplayEditor:
    document: str


@dataclass(slots=True)
class RecordingHost:
    """Host stand-in that tracks visible editors and records decorations."""

    editors: list[ReplayEditor] = field(default_factory=list[ReplayEditor])
    output: list[dict[str, Any]] = field(default_factory=list[dict[str, Any]])

    def visible_editors(self) -> Iterable[ReplayEditor]:
        return list(self.editors)

    def set_decorations(
        self,
        editor: ReplayEditor,
        style: DecorationStyle,
        ranges: Sequence[Range],
    ) -> None:
        self.output.append({
            "event": "decorations",
            "document": editor.document,
            "style": style.to_dict(),
            "ranges": [range_to_dict(r) for r in ranges],
        })


def _require_document(event: dict[str, Any], index: int) -> str:
    document = event.get("document")
    if not isinstance(document, str) or not document:
        raise ValueError(f"event {index} needs a 'document' string")
    return document


def replay_events(
    events: Iterable[dict[str, Any]],
    feature: InactiveRegionsFeature,
    host: RecordingHost,
) -> int:
    """Feed ``events`` to ``feature``; returns the number of malformed payloads.

    Output rows accumulate on ``host.output`` in event order.
    """
    malformed = 0
    for index, event in enumerate(events):
        kind = event.get("event")
        if kind == "legend":
            feature.on_capabilities_negotiated(event.get("token_types"))
        elif kind == "visible":
            host.editors = [ReplayEditor(str(doc)) for doc in event.get("documents") or []]
            feature.on_visibility_changed(host.editors)
        elif kind == "close":
            document = _require_document(event, index)
            feature.on_document_closed(document)
            host.editors = [e for e in host.editors if e.document != document]
        elif kind in ("full", "delta"):
            document = _require_document(event, index)
            payload = event.get("payload")
            if not isinstance(payload, dict):
                raise ValueError(f"event {index} needs a 'payload' object")
            try:
                if kind == "full":
                    result = feature.provide_full(document, tokens_from_dict(payload))
                else:
                    result = feature.provide_delta(
                        document,
                        event.get("previous_result_id"),
                        payload_from_dict(payload),
                    )
            except MalformedStream as exc:
                malformed += 1
                host.output.append({
                    "event": "error",
                    "document": document,
                    "message": str(exc),
                })
                continue
            if isinstance(result, SemanticTokens):
                host.output.append({
                    "event": "tokens",
                    "document": document,
                    "payload": tokens_to_dict(result),
                })
            else:
                host.output.append({
                    "event": "unresolved",
                    "document": document,
                    "payload": delta_to_dict(result),
                })
        else:
            raise ValueError(f"event {index} has unknown kind {kind!r}")
    return malformed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Replay a semantic-token session log through the inactive-region feature."
    )
    parser.add_argument(
        "--events", required=True, type=Path, help="Path to the session JSONL log"
    )
    parser.add_argument(
        "--config", type=Path, default=None, help="Feature config JSON (optional)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write results as JSONL here instead of stdout.",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging."
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    if not args.events.exists():
        log.error("Events file not found: %s", args.events)
        return EXIT_USAGE
    try:
        config = load_feature_config(args.config)
        events = load_jsonl(args.events)
    except (OSError, ValueError) as exc:
        log.error("Cannot load inputs: %s", exc)
        return EXIT_USAGE

    host = RecordingHost()
    feature = InactiveRegionsFeature(host, config)
    try:
        malformed = replay_events(events, feature, host)
    except ValueError as exc:
        log.error("Invalid event log: %s", exc)
        return EXIT_USAGE

    if args.output is not None:
        save_jsonl(host.output, args.output)
        log.info("Wrote %d rows to %s", len(host.output), args.output)
    else:
        for row in host.output:
            sys.stdout.buffer.write(dumps_line(row))
            sys.stdout.buffer.write(b"\n")

    log.info("Replayed %d events (%d malformed)", len(events), malformed)
    return EXIT_MALFORMED if malformed else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
