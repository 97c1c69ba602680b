"""
gitmask

A git clean/smudge filter that swaps configured plaintext tokens
(passwords and similar literals) for obfuscated stand-ins when content
is committed, and restores them on checkout.
"""

__version__ = "0.1.0"

from .config import DEFAULT_MAPPING, DEFAULT_PROFILE
from .engine import (
    Direction,
    GitmaskError,
    InvalidDirection,
    InvalidMapping,
    Mapping,
    MappingEntry,
    transform,
    transform_bytes,
    transform_stream,
)
from .manifest import Manifest, ManifestError, resolve_manifest

__all__ = [
    "DEFAULT_MAPPING",
    "DEFAULT_PROFILE",
    "Direction",
    "GitmaskError",
    "InvalidDirection",
    "InvalidMapping",
    "Mapping",
    "MappingEntry",
    "transform",
    "transform_bytes",
    "transform_stream",
    "Manifest",
    "ManifestError",
    "resolve_manifest",
]
