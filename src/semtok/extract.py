"""Collect the ranges of tokens carrying the inactive-code classification."""

from __future__ import annotations

from collections.abc import Iterable

from semtok.types import AbsoluteRecord, Range


def extract_inactive_ranges(
    records: Iterable[AbsoluteRecord],
    sentinel_type_index: int | None,
) -> list[Range]:
    """Return one single-line range per record whose type is the sentinel.

    Output order follows stream order. Without a sentinel index the result is
    always empty and ``records`` is not consumed.
    """
    if sentinel_type_index is None:
        return []
    return [
        record.to_range()
        for record in records
        if record.token_type == sentinel_type_index
    ]
