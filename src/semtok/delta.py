"""Reconstruct a flat token stream from a previous stream plus splice edits.

Edits are offsets into the *previous* stream. They are applied right to left
so each edit's ``start`` is still a valid reference point when it is reached:
the untouched suffix is copied first, then each edit's insertion together
with the gap that precedes the next edit, and finally the untouched prefix.
"""

from __future__ import annotations

from array import array
from collections.abc import Sequence

from semtok.codec import RECORD_WIDTH
from semtok.errors import MalformedEdits, MalformedStream
from semtok.types import TokenEdit, to_buffer


def delta_length(edits: Sequence[TokenEdit]) -> int:
    """Net change in stream length produced by ``edits``."""
    return sum(len(edit.data) - edit.delete_count for edit in edits)


def validate_edits(previous_length: int, edits: Sequence[TokenEdit]) -> None:
    """Reject edit lists that are out of bounds, overlapping, or unordered.

    Edits must be sorted by ``start``; an edit may begin exactly where the
    previous one ends.
    """
    prior_end = 0
    for index, edit in enumerate(edits):
        if edit.end > previous_length:
            raise MalformedEdits(
                f"edit {index} spans [{edit.start}, {edit.end}) beyond "
                f"previous data length {previous_length}"
            )
        if edit.start < prior_end:
            raise MalformedEdits(
                f"edit {index} starts at {edit.start}, inside or before the "
                f"previous edit ending at {prior_end}"
            )
        prior_end = edit.end


def apply_edits(
    previous: Sequence[int],
    edits: Sequence[TokenEdit],
    *,
    validate: bool = True,
) -> array[int]:
    """Apply ``edits`` to ``previous`` and return the new flat stream.

    ``previous`` is never modified. With ``validate=False`` the edit list is
    trusted as sent, but a splice that would read outside ``previous`` still
    raises MalformedStream rather than producing a corrupt buffer.
    """
    if validate:
        validate_edits(len(previous), edits)

    target_length = len(previous) + delta_length(edits)
    if target_length < 0:
        raise MalformedStream(
            f"edits shrink data of length {len(previous)} below zero"
        )
    if target_length % RECORD_WIDTH:
        raise MalformedStream(
            f"patched data length {target_length} is not a multiple of {RECORD_WIDTH}"
        )

    if isinstance(previous, array) and previous.typecode == "I":
        source = previous
    else:
        source = to_buffer(previous)
    target = array("I", [0]) * target_length

    source_last_start = len(source)
    target_last_start = target_length
    for edit in reversed(edits):
        copy_count = source_last_start - edit.end
        if copy_count < 0 or target_last_start - copy_count < len(edit.data):
            raise MalformedStream(
                f"edit at {edit.start} (delete {edit.delete_count}) overlaps "
                "a later edit or runs past the previous data"
            )
        if copy_count:
            target[target_last_start - copy_count:target_last_start] = (
                source[source_last_start - copy_count:source_last_start]
            )
            target_last_start -= copy_count
        if edit.data:
            inserted = to_buffer(edit.data)
            target[target_last_start - len(inserted):target_last_start] = inserted
            target_last_start -= len(inserted)
        source_last_start = edit.start

    if source_last_start != target_last_start:
        raise MalformedStream(
            f"patch left {source_last_start} prefix integers for "
            f"{target_last_start} target slots"
        )
    if source_last_start:
        target[:source_last_start] = source[:source_last_start]
    return target
