"""Manifest models for the pymongo-legacy adapter layer."""

from .manifest import (
    ConfigurationError,
    Manifest,
    ManifestEntry,
    SequenceWrap,
    SingleWrap,
    WrapKind,
    WrapRule,
)

__all__ = [
    "ConfigurationError",
    "Manifest",
    "ManifestEntry",
    "SequenceWrap",
    "SingleWrap",
    "WrapKind",
    "WrapRule",
]
