"""Semantic token inactive-region pipeline: decode, patch, extract, remap."""

from semtok.codec import RECORD_WIDTH, decode_records, record_count, validate_stream
from semtok.config import DecorationStyle, FeatureConfig, load_feature_config
from semtok.delta import apply_edits, delta_length, validate_edits
from semtok.errors import MalformedEdits, MalformedStream, SemtokError
from semtok.extract import extract_inactive_ranges
from semtok.feature import DecorationHost, InactiveRegionsFeature, VisibleEditor
from semtok.legend import LegendConfig
from semtok.remap import remap_inactive_type
from semtok.store import DocumentState, DocumentTokenStore
from semtok.types import (
    AbsoluteRecord,
    Err,
    Ok,
    Position,
    Range,
    Result,
    SemanticTokens,
    SemanticTokensDelta,
    TokenEdit,
    Unresolved,
)

__all__ = [
    "RECORD_WIDTH",
    "AbsoluteRecord",
    "DecorationHost",
    "DecorationStyle",
    "DocumentState",
    "DocumentTokenStore",
    "Err",
    "FeatureConfig",
    "InactiveRegionsFeature",
    "LegendConfig",
    "MalformedEdits",
    "MalformedStream",
    "Ok",
    "Position",
    "Range",
    "Result",
    "SemanticTokens",
    "SemanticTokensDelta",
    "SemtokError",
    "TokenEdit",
    "Unresolved",
    "VisibleEditor",
    "apply_edits",
    "decode_records",
    "delta_length",
    "extract_inactive_ranges",
    "load_feature_config",
    "record_count",
    "remap_inactive_type",
    "validate_edits",
    "validate_stream",
]
