"""Per-document cache of the latest token stream and inactive ranges.

Entries are keyed by an explicit document key and removed by ``forget`` when
the host reports the document closed. Only the most recent transmission is
kept per document; it is the base any following delta must reference.
"""

from __future__ import annotations

import logging
import threading
from array import array
from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field

from semtok.codec import RECORD_WIDTH, decode_records, validate_stream
from semtok.delta import apply_edits
from semtok.extract import extract_inactive_ranges
from semtok.legend import LegendConfig
from semtok.types import (
    Err,
    Ok,
    Range,
    Result,
    SemanticTokensDelta,
    Unresolved,
    to_buffer,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DocumentState:
    """Latest transmission for one live document."""

    result_id: str | None
    buffer: array[int]
    ranges: list[Range] = field(default_factory=list[Range])


class DocumentTokenStore:
    """Holds one DocumentState per live document.

    All access goes through a single lock so a multi-threaded host gets
    serialized updates; in the usual single-threaded event loop it is never
    contended.
    """

    def __init__(self, legend: LegendConfig, *, validate_edits: bool = True) -> None:
        self._legend = legend
        self._validate_edits = validate_edits
        self._states: dict[Hashable, DocumentState] = {}
        self._lock = threading.RLock()

    @property
    def legend(self) -> LegendConfig:
        return self._legend

    def record_full(
        self,
        document: Hashable,
        result_id: str | None,
        buffer: Sequence[int],
    ) -> list[Range]:
        """Store a full transmission and return its inactive ranges.

        Raises MalformedStream without touching the stored state if the
        buffer is not a whole number of non-empty records.
        """
        return self._store(document, result_id, to_buffer(buffer)).ranges

    def _store(
        self,
        document: Hashable,
        result_id: str | None,
        data: array[int],
    ) -> DocumentState:
        validate_stream(data)
        ranges = extract_inactive_ranges(
            decode_records(data), self._legend.sentinel_type_index,
        )
        state = DocumentState(result_id, data, ranges)
        with self._lock:
            self._states[document] = state
        logger.debug(
            "Stored %d tokens (%d inactive) for %r at result %r",
            len(data) // RECORD_WIDTH, len(ranges), document, result_id,
        )
        return state

    def record_delta(
        self,
        document: Hashable,
        delta: SemanticTokensDelta,
        base_result_id: str | None,
    ) -> Result[DocumentState, Unresolved]:
        """Patch the stored stream with ``delta`` and store the result.

        On success the new DocumentState is returned, carrying both the
        patched buffer and its inactive ranges.

        Returns Err(Unresolved) and leaves the state untouched when there is
        no stored stream for ``document`` or it is not ``base_result_id``.
        """
        with self._lock:
            state = self._states.get(document)
            if state is None:
                return Err(Unresolved("no previous tokens", base_result_id))
            if state.result_id is None or state.result_id != base_result_id:
                return Err(Unresolved(
                    f"stored result {state.result_id!r} does not match delta base",
                    base_result_id,
                ))
            patched = apply_edits(
                state.buffer, delta.edits, validate=self._validate_edits,
            )
            return Ok(self._store(document, delta.result_id, patched))

    def previous_buffer(self, document: Hashable) -> array[int] | None:
        with self._lock:
            state = self._states.get(document)
        return None if state is None else state.buffer

    def last_ranges(self, document: Hashable) -> list[Range] | None:
        """Ranges from the latest transmission, or None if none was seen."""
        with self._lock:
            state = self._states.get(document)
        return None if state is None else state.ranges

    def forget(self, document: Hashable) -> bool:
        """Drop the entry for a closed document. Returns whether one existed."""
        with self._lock:
            return self._states.pop(document, None) is not None

    def __contains__(self, document: object) -> bool:
        with self._lock:
            return document in self._states

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)
