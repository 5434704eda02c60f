"""Decode relative-delta flat token streams into absolute records.

Tokens are encoded as 5 integers per token::

    [deltaLine, deltaStartChar, length, tokenType, tokenModifiers]

``deltaStartChar`` is relative to the previous token only when both sit on
the same line; a token on a new line carries an absolute start character.
There is no encoder: rewriting happens in place on the flat representation.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from semtok.errors import MalformedStream
from semtok.types import AbsoluteRecord

RECORD_WIDTH = 5

# Field offsets inside one record.
DELTA_LINE = 0
DELTA_START = 1
LENGTH = 2
TOKEN_TYPE = 3
TOKEN_MODIFIERS = 4


def record_count(buffer: Sequence[int]) -> int:
    """Number of records in ``buffer``; raises if it is not a whole number."""
    if len(buffer) % RECORD_WIDTH:
        raise MalformedStream(
            f"token data length {len(buffer)} is not a multiple of {RECORD_WIDTH}"
        )
    return len(buffer) // RECORD_WIDTH


def validate_stream(buffer: Sequence[int]) -> None:
    """Raise MalformedStream unless ``buffer`` is a well-formed flat stream.

    Every record must span at least one character.
    """
    count = record_count(buffer)
    for offset in range(LENGTH, count * RECORD_WIDTH, RECORD_WIDTH):
        if buffer[offset] == 0:
            raise MalformedStream(
                f"token {offset // RECORD_WIDTH} has zero length"
            )


def _iter_records(buffer: Sequence[int], count: int) -> Iterator[AbsoluteRecord]:
    last_line = 0
    last_start = 0
    for offset in range(0, count * RECORD_WIDTH, RECORD_WIDTH):
        delta_line = buffer[offset + DELTA_LINE]
        delta_start = buffer[offset + DELTA_START]
        line = last_line + delta_line
        start = last_start + delta_start if delta_line == 0 else delta_start
        length = buffer[offset + LENGTH]
        if length == 0:
            raise MalformedStream(f"token {offset // RECORD_WIDTH} has zero length")
        yield AbsoluteRecord(
            line=line,
            start_character=start,
            length=length,
            token_type=buffer[offset + TOKEN_TYPE],
            token_modifiers=buffer[offset + TOKEN_MODIFIERS],
        )
        last_line = line
        last_start = start


def decode_records(buffer: Sequence[int]) -> Iterator[AbsoluteRecord]:
    """Lazily decode ``buffer`` into absolute records.

    The length check runs before the first record is produced. Every call
    starts from ``(0, 0)``, so decoding the same buffer twice yields the same
    records.
    """
    count = record_count(buffer)
    return _iter_records(buffer, count)
