"""
Global configuration and environment handling.

This module is responsible for:
- Defining global constants and defaults
- Holding the embedded default mapping table
- Reading overrides (manifest path, profile, verbosity) from the environment

Nothing in this file should depend on:
- the filesystem
- the manifest structure
- the substitution engine
- CLI arguments
"""

from __future__ import annotations

import os
from typing import Final, Optional, Tuple

# ---------------------------------------------------------------------------
# Tool / format versioning
# ---------------------------------------------------------------------------

SUPPORTED_MANIFEST_VERSION: Final[int] = 1
TOOL_VERSION: Final[str] = "0.1.0"

# ---------------------------------------------------------------------------
# Default behavior
# ---------------------------------------------------------------------------

DEFAULT_PROFILE: Final[str] = "default"
DEFAULT_ENCODING: Final[str] = "utf-8"
DEFAULT_MANIFEST: Final[str] = ".gitmask.yml"

# Declaration order is substitution order.
DEFAULT_MAPPING: Final[Tuple[Tuple[str, str], ...]] = (
    ("prodPassword", "obfuscatedProductionPassword"),
    ("devPassword", "obfuscatedDevelopmentPassword"),
)

USAGE_MESSAGE: Final[str] = "use smudge/clean as the first argument"

# ---------------------------------------------------------------------------
# Environment variable names
# ---------------------------------------------------------------------------

ENV_MANIFEST: Final[str] = "GITMASK_MANIFEST"
ENV_PROFILE: Final[str] = "GITMASK_PROFILE"
ENV_VERBOSE: Final[str] = "GITMASK_VERBOSE"

_TRUTHY = {"1", "true", "yes", "on"}

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_manifest_path() -> Optional[str]:
    """
    Return the manifest path configured in the environment, if any.

    Returns:
        str | None: path from GITMASK_MANIFEST, or None when unset/empty
    """

    return os.getenv(ENV_MANIFEST) or None


def get_profile_name() -> str:
    """Return the profile selected by the environment, or the default one."""

    return os.getenv(ENV_PROFILE) or DEFAULT_PROFILE


def is_verbose_env() -> bool:
    return os.getenv(ENV_VERBOSE, "").strip().lower() in _TRUTHY
