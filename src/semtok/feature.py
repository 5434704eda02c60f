"""Inactive-region handling layered over semantic token transmissions.

The language server marks preprocessor-disabled code with the "comment"
token type. Those spans are pulled out as ranges and painted by the host as a
whole-line background, and their token type is rewritten to an index past
the legend so the host's own comment styling does not also apply.

The host is reached only through two narrow protocols: ``DecorationHost``
(visible editors plus a decoration primitive) and ``VisibleEditor``. Host
events are delivered by calling the ``on_*`` methods.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Sequence
from typing import Protocol, runtime_checkable

from semtok.config import DecorationStyle, FeatureConfig
from semtok.errors import MalformedStream
from semtok.legend import LegendConfig
from semtok.remap import remap_inactive_type
from semtok.store import DocumentTokenStore
from semtok.types import (
    Err,
    Ok,
    Range,
    SemanticTokens,
    SemanticTokensDelta,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class VisibleEditor(Protocol):
    """An editor currently showing a document."""

    @property
    def document(self) -> Hashable: ...


@runtime_checkable
class DecorationHost(Protocol):
    """Rendering host operations the feature depends on."""

    def visible_editors(self) -> Iterable[VisibleEditor]: ...

    def set_decorations(
        self,
        editor: VisibleEditor,
        style: DecorationStyle,
        ranges: Sequence[Range],
    ) -> None: ...


class InactiveRegionsFeature:
    """Decode, patch, extract and remap semantic tokens for one session."""

    def __init__(self, host: DecorationHost, config: FeatureConfig | None = None) -> None:
        self._host = host
        self._config = config or FeatureConfig()
        self._legend: LegendConfig | None = None
        self._store = DocumentTokenStore(
            LegendConfig.disabled(), validate_edits=self._config.validate_edits,
        )

    @property
    def config(self) -> FeatureConfig:
        return self._config

    @property
    def legend(self) -> LegendConfig | None:
        return self._legend

    @property
    def store(self) -> DocumentTokenStore:
        return self._store

    def on_capabilities_negotiated(self, token_types: Sequence[str] | None) -> None:
        """Record the negotiated legend. Only the first call takes effect.

        ``None`` means the server offers no semantic tokens; the feature then
        stays disabled. Tokens cached before negotiation are discarded.
        """
        if self._legend is not None:
            logger.warning("Token legend already negotiated; ignoring update")
            return
        if token_types is None:
            self._legend = LegendConfig.disabled()
        else:
            self._legend = LegendConfig.from_token_types(
                token_types, self._config.sentinel_name,
            )
        self._store = DocumentTokenStore(
            self._legend, validate_edits=self._config.validate_edits,
        )

    def provide_full(self, document: Hashable, tokens: SemanticTokens) -> SemanticTokens:
        """Handle a full transmission and return the tokens to forward."""
        try:
            ranges = self._store.record_full(document, tokens.result_id, tokens.data)
        except MalformedStream as exc:
            logger.warning("Dropping malformed tokens for %r: %s", document, exc)
            raise
        self._paint(document, ranges)
        legend = self._store.legend
        data = remap_inactive_type(
            tokens.data, legend.sentinel_type_index, legend.appendix_type_index,
        )
        return SemanticTokens(result_id=tokens.result_id, data=data)

    def provide_delta(
        self,
        document: Hashable,
        previous_result_id: str | None,
        payload: SemanticTokens | SemanticTokensDelta,
    ) -> SemanticTokens | SemanticTokensDelta:
        """Handle a delta request's response.

        Servers may answer a delta request with full tokens, which are
        handled as a full transmission. An unresolvable delta comes back
        unchanged so the transport falls back to a full request.
        """
        if isinstance(payload, SemanticTokens):
            return self.provide_full(document, payload)

        try:
            outcome = self._store.record_delta(document, payload, previous_result_id)
        except MalformedStream as exc:
            logger.warning("Dropping malformed delta for %r: %s", document, exc)
            raise

        match outcome:
            case Err(error=unresolved):
                logger.warning(
                    "Cannot apply delta for %r against %r: %s",
                    document, unresolved.base_result_id, unresolved.reason,
                )
                return payload
            case Ok(value=state):
                self._paint(document, state.ranges)
                legend = self._store.legend
                data = remap_inactive_type(
                    state.buffer, legend.sentinel_type_index, legend.appendix_type_index,
                )
                return SemanticTokens(result_id=payload.result_id, data=data)

    def on_visibility_changed(self, editors: Iterable[VisibleEditor]) -> None:
        """Reapply cached ranges to newly visible editors; nothing is recomputed."""
        for editor in editors:
            ranges = self._store.last_ranges(editor.document)
            if ranges is not None:
                self._host.set_decorations(editor, self._config.decoration, ranges)

    def on_document_closed(self, document: Hashable) -> None:
        if self._store.forget(document):
            logger.debug("Forgot tokens for closed document %r", document)

    def _paint(self, document: Hashable, ranges: list[Range]) -> None:
        for editor in self._host.visible_editors():
            if editor.document == document:
                self._host.set_decorations(editor, self._config.decoration, ranges)
