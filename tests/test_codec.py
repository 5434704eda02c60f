"""Tests for semtok.codec record decoding."""
from __future__ import annotations

from array import array

import pytest

from semtok.codec import decode_records, record_count, validate_stream
from semtok.errors import MalformedStream
from semtok.types import AbsoluteRecord


class TestRecordCount:
    def test_empty(self) -> None:
        assert record_count([]) == 0

    def test_two_records(self) -> None:
        assert record_count([0, 0, 3, 1, 0, 2, 0, 4, 2, 0]) == 2

    def test_partial_record_rejected(self) -> None:
        with pytest.raises(MalformedStream, match="multiple of 5"):
            record_count([0, 0, 3, 1])

    def test_validate_stream_accepts_array(self) -> None:
        validate_stream(array("I", [1, 2, 3, 4, 5]))


class TestDecodeRecords:
    def test_same_line_columns_accumulate(self) -> None:
        records = list(decode_records([1, 2, 3, 0, 0, 0, 5, 2, 1, 4]))
        assert records == [
            AbsoluteRecord(line=1, start_character=2, length=3, token_type=0, token_modifiers=0),
            AbsoluteRecord(line=1, start_character=7, length=2, token_type=1, token_modifiers=4),
        ]

    def test_new_line_resets_column_baseline(self) -> None:
        records = list(decode_records([0, 10, 3, 0, 0, 2, 4, 6, 1, 0]))
        assert (records[1].line, records[1].start_character) == (2, 4)

    def test_decoding_is_restartable(self) -> None:
        buffer = array("I", [3, 1, 2, 0, 0, 0, 4, 1, 1, 0, 1, 0, 5, 2, 0])
        assert list(decode_records(buffer)) == list(decode_records(buffer))

    def test_length_checked_before_iteration(self) -> None:
        with pytest.raises(MalformedStream):
            decode_records([0, 0, 1, 0, 0, 1])

    def test_empty_buffer(self) -> None:
        assert list(decode_records([])) == []

    def test_end_character(self) -> None:
        record = next(decode_records([2, 4, 6, 0, 0]))
        assert record.end_character == 10


class TestZeroLength:
    def test_validate_stream_rejects_zero_length(self) -> None:
        with pytest.raises(MalformedStream, match="token 1 has zero length"):
            validate_stream([0, 0, 2, 0, 0, 0, 3, 0, 0, 0])

    def test_decode_rejects_zero_length(self) -> None:
        with pytest.raises(MalformedStream, match="zero length"):
            list(decode_records([1, 2, 0, 0, 0]))
