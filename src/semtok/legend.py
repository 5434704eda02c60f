"""Session-wide token legend state captured at capability negotiation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_SENTINEL_NAME = "comment"


@dataclass(frozen=True, slots=True)
class LegendConfig:
    """Immutable view of the negotiated legend.

    ``sentinel_type_index`` is None when the designated classification is
    absent; extraction and remapping are then no-ops for the session.
    """

    sentinel_type_index: int | None
    appendix_type_index: int
    token_types: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.appendix_type_index < 0:
            raise ValueError("appendix_type_index must be >= 0")
        if self.sentinel_type_index is not None:
            if not 0 <= self.sentinel_type_index < self.appendix_type_index:
                raise ValueError(
                    f"sentinel_type_index {self.sentinel_type_index} must lie "
                    f"inside the legend (< {self.appendix_type_index})"
                )

    @property
    def enabled(self) -> bool:
        return self.sentinel_type_index is not None

    @classmethod
    def from_token_types(
        cls,
        token_types: Sequence[str],
        sentinel_name: str = DEFAULT_SENTINEL_NAME,
    ) -> LegendConfig:
        """Scan the legend for ``sentinel_name``; the last occurrence wins."""
        sentinel: int | None = None
        for index, name in enumerate(token_types):
            if name == sentinel_name:
                sentinel = index
        if sentinel is None:
            logger.info(
                "Legend has no %r token type; inactive regions disabled",
                sentinel_name,
            )
        else:
            logger.info(
                "Inactive regions use token type %d (%r), remapped to %d",
                sentinel, sentinel_name, len(token_types),
            )
        return cls(
            sentinel_type_index=sentinel,
            appendix_type_index=len(token_types),
            token_types=tuple(token_types),
        )

    @classmethod
    def disabled(cls) -> LegendConfig:
        return cls(sentinel_type_index=None, appendix_type_index=0)
