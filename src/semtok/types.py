"""Core types for semantic token decoding and inactive-region extraction.

Every stage of the pipeline shares these types. Positions are zero-based
(line, character) pairs in the document's text. Flat token streams are held
as ``array("I")`` buffers: five unsigned 32-bit integers per record.

Type hierarchy:
  Ok[T] / Err[E]      - Strict algebraic Result type
  Position / Range    - Text coordinates handed to the rendering host
  AbsoluteRecord      - One decoded token with absolute coordinates
  TokenEdit           - One splice against a previous flat stream
  SemanticTokens      - Full transmission payload
  SemanticTokensDelta - Incremental transmission payload
  Unresolved          - Typed reason a delta could not be applied
"""

from __future__ import annotations

from array import array
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeAlias, TypeVar

from semtok.errors import MalformedEdits, MalformedStream

_UINT32_MAX = 0xFFFFFFFF


def to_buffer(values: Iterable[int]) -> array[int]:
    """Copy an integer sequence into a fresh unsigned 32-bit buffer."""
    try:
        return array("I", values)
    except (OverflowError, TypeError) as exc:
        raise MalformedStream(f"token data must be uint32 values: {exc}") from exc


# ---------------------------------------------------------------------------
# Result ADT
# ---------------------------------------------------------------------------

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success case of Result[T, E].

    Usage::

        match store.record_delta(doc, delta):
            case Ok(value=ranges): paint(ranges)
            case Err(error=unresolved): request_full(unresolved.reason)
    """
    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure case of Result[T, E]."""
    error: E


Result: TypeAlias = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Text coordinates
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Zero-based line/character position."""

    line: int
    character: int

    def __post_init__(self) -> None:
        if self.line < 0 or self.character < 0:
            raise ValueError(
                f"Position must be non-negative, got ({self.line}, {self.character})"
            )


@dataclass(frozen=True, slots=True, order=True)
class Range:
    """Half-open text range ``[start, end)``.

    Invariants (enforced in __post_init__):
        - end >= start
    """

    start: Position
    end: Position

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Range end {self.end} precedes start {self.start}")

    @classmethod
    def on_line(cls, line: int, start_character: int, end_character: int) -> Range:
        return cls(Position(line, start_character), Position(line, end_character))


@dataclass(frozen=True, slots=True)
class AbsoluteRecord:
    """One token with absolute coordinates, derived from a flat stream."""

    line: int
    start_character: int
    length: int
    token_type: int
    token_modifiers: int

    @property
    def end_character(self) -> int:
        return self.start_character + self.length

    def to_range(self) -> Range:
        return Range.on_line(self.line, self.start_character, self.end_character)


# ---------------------------------------------------------------------------
# Transmissions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TokenEdit:
    """Splice ``delete_count`` integers at ``start`` and insert ``data``.

    ``start`` always indexes the *previous* flat stream, never a running
    target offset.
    """

    start: int
    delete_count: int
    data: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if self.start < 0:
            raise MalformedEdits(f"TokenEdit.start must be >= 0, got {self.start}")
        if self.delete_count < 0:
            raise MalformedEdits(
                f"TokenEdit.delete_count must be >= 0, got {self.delete_count}"
            )

    @property
    def end(self) -> int:
        """Exclusive end of the deleted region in the previous stream."""
        return self.start + self.delete_count


@dataclass(frozen=True, slots=True)
class SemanticTokens:
    """Full transmission: an optional result id plus a flat stream."""

    result_id: str | None
    data: array[int] = field(default_factory=lambda: array("I"))

    @classmethod
    def of(cls, result_id: str | None, values: Iterable[int]) -> SemanticTokens:
        return cls(result_id=result_id, data=to_buffer(values))


@dataclass(frozen=True, slots=True)
class SemanticTokensDelta:
    """Incremental transmission against a previously seen result id."""

    result_id: str | None
    edits: tuple[TokenEdit, ...] = ()


@dataclass(frozen=True, slots=True)
class Unresolved:
    """Why a delta could not be applied; the caller requests a full resync."""

    reason: str
    base_result_id: str | None = None
