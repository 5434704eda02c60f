"""Exception types raised by the token pipeline."""

from __future__ import annotations


class SemtokError(Exception):
    """Base class for semtok failures."""


class MalformedStream(SemtokError, ValueError):
    """A flat token stream (or a patch producing one) is structurally invalid.

    Fatal to the single transmission being processed. Nothing derived from the
    offending stream is cached or forwarded.
    """


class MalformedEdits(MalformedStream):
    """A delta's edit list is out of bounds, overlapping, or unordered."""
