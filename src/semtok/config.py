"""Feature configuration: which classification marks inactive code, how
edit lists are checked, and how inactive ranges are decorated.

Loaded from a JSON file; every field has a default, so an empty object is a
valid configuration.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from semtok.io_utils import load_json
from semtok.legend import DEFAULT_SENTINEL_NAME

DEFAULT_BACKGROUND_COLOR = "clangd.inactiveRegions.background"


def _reject_unknown(kind: str, payload: dict[str, Any], allowed: set[str]) -> None:
    unknown = sorted(set(payload) - allowed)
    if unknown:
        raise ValueError(f"Unknown {kind} keys: {', '.join(unknown)}")


def _bool_field(kind: str, payload: dict[str, Any], key: str, default: bool) -> bool:
    value = payload.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{kind} key {key!r} must be true or false, got {value!r}")
    return value


@dataclass(frozen=True, slots=True)
class DecorationStyle:
    """How the host paints inactive ranges.

    ``background_color`` is a theme colour key, resolved by the host.
    """

    is_whole_line: bool = True
    background_color: str = DEFAULT_BACKGROUND_COLOR

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> DecorationStyle:
        _reject_unknown("decoration", payload, {"is_whole_line", "background_color"})
        return cls(
            is_whole_line=_bool_field("decoration", payload, "is_whole_line", True),
            background_color=str(
                payload.get("background_color", DEFAULT_BACKGROUND_COLOR)
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_whole_line": self.is_whole_line,
            "background_color": self.background_color,
        }


@dataclass(frozen=True, slots=True)
class FeatureConfig:
    sentinel_name: str = DEFAULT_SENTINEL_NAME
    validate_edits: bool = True
    decoration: DecorationStyle = field(default_factory=DecorationStyle)

    def __post_init__(self) -> None:
        if not self.sentinel_name:
            raise ValueError("sentinel_name cannot be empty")

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> FeatureConfig:
        _reject_unknown(
            "feature config", payload,
            {"sentinel_name", "validate_edits", "decoration"},
        )
        decoration = payload.get("decoration") or {}
        if not isinstance(decoration, dict):
            raise ValueError("decoration must be a JSON object")
        return cls(
            sentinel_name=str(payload.get("sentinel_name", DEFAULT_SENTINEL_NAME)),
            validate_edits=_bool_field("feature config", payload, "validate_edits", True),
            decoration=DecorationStyle.from_dict(decoration),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sentinel_name": self.sentinel_name,
            "validate_edits": self.validate_edits,
            "decoration": self.decoration.to_dict(),
        }


def load_feature_config(path: Path | None) -> FeatureConfig:
    """Load a FeatureConfig from ``path``; defaults when ``path`` is None."""
    if path is None:
        return FeatureConfig()
    payload = load_json(path)
    if not isinstance(payload, dict):
        raise ValueError(f"Feature config must be a JSON object: {path}")
    return FeatureConfig.from_dict(payload)
