"""Rewrite the inactive classification to an index the host does not know.

The appendix index lies one past the negotiated legend, so the host's own
token styling ignores those spans and only the range decoration shows.
"""

from __future__ import annotations

from array import array
from collections.abc import Sequence

from semtok.codec import RECORD_WIDTH, TOKEN_TYPE, record_count
from semtok.types import to_buffer


def remap_inactive_type(
    buffer: Sequence[int],
    sentinel_type_index: int | None,
    appendix_type_index: int,
) -> array[int]:
    """Return a copy of ``buffer`` with sentinel token types replaced.

    Only the type field of matching records changes. Run once per
    transmission, on the buffer as received.
    """
    count = record_count(buffer)
    data = to_buffer(buffer)
    if sentinel_type_index is None:
        return data
    if sentinel_type_index == appendix_type_index:
        raise ValueError("sentinel and appendix type indices must differ")
    for offset in range(TOKEN_TYPE, count * RECORD_WIDTH, RECORD_WIDTH):
        if data[offset] == sentinel_type_index:
            data[offset] = appendix_type_index
    return data
