"""Tests for semtok.store per-document caching."""
from __future__ import annotations

import pytest

from semtok.errors import MalformedEdits, MalformedStream
from semtok.legend import LegendConfig
from semtok.store import DocumentTokenStore
from semtok.types import Err, Ok, Range, SemanticTokensDelta, TokenEdit

LEGEND = LegendConfig.from_token_types(["comment", "keyword"])


def _store() -> DocumentTokenStore:
    return DocumentTokenStore(LEGEND)


class TestRecordFull:
    def test_returns_and_caches_ranges(self) -> None:
        store = _store()
        ranges = store.record_full("a.c", "1", [2, 4, 6, 0, 0])
        assert ranges == [Range.on_line(2, 4, 10)]
        assert store.last_ranges("a.c") == ranges
        assert store.previous_buffer("a.c").tolist() == [2, 4, 6, 0, 0]

    def test_malformed_not_cached(self) -> None:
        store = _store()
        store.record_full("a.c", "1", [0, 0, 1, 1, 0])
        with pytest.raises(MalformedStream):
            store.record_full("a.c", "2", [0, 0, 1])
        assert store.previous_buffer("a.c").tolist() == [0, 0, 1, 1, 0]

    def test_disabled_legend_yields_no_ranges(self) -> None:
        store = DocumentTokenStore(LegendConfig.disabled())
        assert store.record_full("a.c", "1", [0, 0, 3, 0, 0]) == []
        assert store.last_ranges("a.c") == []

    def test_last_ranges_unknown_document(self) -> None:
        assert _store().last_ranges("missing.c") is None


class TestRecordDelta:
    def test_patches_and_replaces_state(self) -> None:
        store = _store()
        store.record_full("a.c", "1", [0, 0, 3, 1, 0, 2, 0, 4, 2, 0])
        delta = SemanticTokensDelta(
            result_id="2",
            edits=(TokenEdit(start=8, delete_count=1, data=(0,)),),
        )
        outcome = store.record_delta("a.c", delta, "1")
        assert isinstance(outcome, Ok)
        assert outcome.value.result_id == "2"
        assert outcome.value.ranges == [Range.on_line(2, 0, 4)]
        assert outcome.value.buffer.tolist() == [0, 0, 3, 1, 0, 2, 0, 4, 0, 0]
        assert store.previous_buffer("a.c").tolist() == [0, 0, 3, 1, 0, 2, 0, 4, 0, 0]

    def test_delta_matches_direct_full_transmission(self) -> None:
        patched_store = _store()
        patched_store.record_full("a.c", "1", [0, 0, 3, 1, 0])
        delta = SemanticTokensDelta("2", (TokenEdit(5, 0, (1, 2, 5, 0, 0)),))
        patched_store.record_delta("a.c", delta, "1")

        direct_store = _store()
        direct_store.record_full("a.c", "2", [0, 0, 3, 1, 0, 1, 2, 5, 0, 0])
        assert patched_store.last_ranges("a.c") == direct_store.last_ranges("a.c")

    def test_unknown_document_unresolved(self) -> None:
        outcome = _store().record_delta("a.c", SemanticTokensDelta("2"), "1")
        assert isinstance(outcome, Err)
        assert outcome.error.base_result_id == "1"

    def test_stale_base_leaves_state(self) -> None:
        store = _store()
        store.record_full("a.c", "1", [2, 4, 6, 0, 0])
        delta = SemanticTokensDelta("3", (TokenEdit(0, 5),))
        outcome = store.record_delta("a.c", delta, "2")
        assert isinstance(outcome, Err)
        assert store.previous_buffer("a.c").tolist() == [2, 4, 6, 0, 0]
        assert store.last_ranges("a.c") == [Range.on_line(2, 4, 10)]

    def test_missing_stored_result_id_never_matches(self) -> None:
        store = _store()
        store.record_full("a.c", None, [2, 4, 6, 0, 0])
        assert isinstance(store.record_delta("a.c", SemanticTokensDelta("2"), None), Err)

    def test_malformed_edits_leave_state(self) -> None:
        store = _store()
        store.record_full("a.c", "1", [2, 4, 6, 0, 0])
        delta = SemanticTokensDelta("2", (TokenEdit(3, 5),))
        with pytest.raises(MalformedEdits):
            store.record_delta("a.c", delta, "1")
        assert store.previous_buffer("a.c").tolist() == [2, 4, 6, 0, 0]


class TestForget:
    def test_forget_removes_entry(self) -> None:
        store = _store()
        store.record_full("a.c", "1", [2, 4, 6, 0, 0])
        assert "a.c" in store
        assert store.forget("a.c") is True
        assert "a.c" not in store
        assert store.last_ranges("a.c") is None
        assert len(store) == 0

    def test_forget_unknown(self) -> None:
        assert _store().forget("a.c") is False


class TestZeroLengthTokens:
    def test_rejected_even_when_disabled(self) -> None:
        store = DocumentTokenStore(LegendConfig.disabled())
        with pytest.raises(MalformedStream, match="zero length"):
            store.record_full("a.c", "1", [0, 0, 0, 0, 0])
        assert "a.c" not in store

    def test_delta_producing_zero_length_rejected(self) -> None:
        store = _store()
        store.record_full("a.c", "1", [2, 4, 6, 0, 0])
        delta = SemanticTokensDelta("2", (TokenEdit(2, 1, (0,)),))
        with pytest.raises(MalformedStream):
            store.record_delta("a.c", delta, "1")
        assert store.previous_buffer("a.c").tolist() == [2, 4, 6, 0, 0]
