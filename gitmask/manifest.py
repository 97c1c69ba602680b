"""
Manifest loading, validation, and normalization.

This module answers one question:
    "Which tokens should be masked, and in what order?"

Responsibilities:
- Load the mapping YAML file
- Validate structure and version
- Normalize defaults
- Expose each profile as a ready-to-use engine Mapping

This module does NOT:
- Read or write filtered content
- Perform substitutions
- Decide which files git pipes through the filter
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .config import (
    DEFAULT_ENCODING,
    DEFAULT_MANIFEST,
    DEFAULT_MAPPING,
    DEFAULT_PROFILE,
    SUPPORTED_MANIFEST_VERSION,
    get_manifest_path,
)
from .engine import GitmaskError, InvalidMapping, Mapping, MappingEntry
from .utils import check_encoding


class ManifestError(GitmaskError, RuntimeError):
    """Mapping file is missing, unreadable, or malformed."""


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProfileConfig:
    name: str
    mapping: Mapping


@dataclass(frozen=True)
class Manifest:
    version: int
    encoding: str
    profiles: Dict[str, ProfileConfig]
    source: Optional[Path] = None

    # ------------------------------------------------------------------
    # Loading API
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: str | Path) -> "Manifest":
        """
        Load and validate a manifest file.

        Args:
            path: Path to the manifest YAML file

        Raises:
            ManifestError: if the manifest is missing or invalid

        Returns:
            Manifest
        """

        path = Path(path)
        if not path.is_file():
            raise ManifestError(f"Manifest file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as e:
            raise ManifestError(f"Invalid YAML in {path}: {e}") from e
        except OSError as e:
            raise ManifestError(f"Cannot read manifest {path}: {e}") from e

        return cls.from_dict(raw, source=path)

    @classmethod
    def builtin(cls) -> "Manifest":
        """Manifest holding only the embedded default mapping."""

        mapping = Mapping.from_pairs(DEFAULT_MAPPING)
        return cls(
            version=SUPPORTED_MANIFEST_VERSION,
            encoding=DEFAULT_ENCODING,
            profiles={DEFAULT_PROFILE: ProfileConfig(name=DEFAULT_PROFILE, mapping=mapping)},
        )

    @classmethod
    def from_dict(cls, data: Any, source: Optional[Path] = None) -> "Manifest":
        if not isinstance(data, dict):
            raise ManifestError("Manifest must be a mapping at the top level")

        version = data.get("version")
        if version != SUPPORTED_MANIFEST_VERSION:
            raise ManifestError(f"Unsupported manifest version: {version}")

        encoding = cls._parse_encoding(data.get("encoding", DEFAULT_ENCODING))
        profiles_cfg = cls._parse_profiles(data.get("profiles") or {})

        if DEFAULT_PROFILE not in profiles_cfg:
            raise ManifestError(
                f"Default profile '{DEFAULT_PROFILE}' not defined in manifest"
            )

        return cls(
            version=version,
            encoding=encoding,
            profiles=profiles_cfg,
            source=source,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_encoding(value: Any) -> str:
        if not isinstance(value, str) or not value:
            raise ManifestError(f"Invalid encoding: {value!r}")
        try:
            return check_encoding(value)
        except LookupError:
            raise ManifestError(f"Unknown encoding: {value}")
        except ValueError as e:
            raise ManifestError(f"Unsupported encoding: {e}") from e

    @staticmethod
    def _parse_profiles(data: Any) -> Dict[str, ProfileConfig]:
        if not isinstance(data, dict):
            raise ManifestError("'profiles' must be a mapping of profile names")

        profiles: Dict[str, ProfileConfig] = {}

        for name, profile_data in data.items():
            profile_data = profile_data or {}
            if not isinstance(profile_data, dict):
                raise ManifestError(f"Profile '{name}' must be a mapping")

            mappings_raw = profile_data.get("mappings") or []
            if not isinstance(mappings_raw, list):
                raise ManifestError(f"Profile '{name}': 'mappings' must be a list")

            entries = []
            for idx, item in enumerate(mappings_raw):
                if not isinstance(item, dict) or "plaintext" not in item or "obfuscated" not in item:
                    raise ManifestError(
                        f"Mapping #{idx} in profile '{name}' needs 'plaintext' and 'obfuscated'"
                    )
                entries.append(
                    MappingEntry(plaintext=item["plaintext"], obfuscated=item["obfuscated"])
                )

            try:
                mapping = Mapping(tuple(entries))
            except InvalidMapping as e:
                raise ManifestError(f"Profile '{name}': {e}") from e

            profiles[str(name)] = ProfileConfig(name=str(name), mapping=mapping)

        return profiles

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------

    def get_profile(self, name: Optional[str] = None) -> ProfileConfig:
        """
        Return a profile by name, falling back to default.
        """

        name = name or DEFAULT_PROFILE
        try:
            return self.profiles[name]
        except KeyError:
            raise ManifestError(f"Profile not found: {name}")

    def describe_source(self) -> str:
        return str(self.source) if self.source else "built-in mapping"


def resolve_manifest(explicit: Optional[str] = None, cwd: Optional[Path] = None) -> Manifest:
    """
    Pick the manifest for this invocation.

    Order: explicit path, GITMASK_MANIFEST, DEFAULT_MANIFEST in ``cwd``,
    then the built-in mapping. A configured path that does not exist is
    an error; only the implicit default file may be absent.
    """

    configured = explicit or get_manifest_path()
    if configured:
        return Manifest.load(configured)

    candidate = Path(cwd or Path.cwd()) / DEFAULT_MANIFEST
    if candidate.is_file():
        return Manifest.load(candidate)

    return Manifest.builtin()
