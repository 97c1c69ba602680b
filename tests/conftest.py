"""
Pytest configuration for gitmask tests.
"""

from pathlib import Path
from typing import Callable

import pytest
import yaml

from gitmask.config import DEFAULT_MAPPING, ENV_MANIFEST, ENV_PROFILE, ENV_VERBOSE
from gitmask.engine import Mapping


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Run every test from an empty directory with no gitmask variables set,
    so a stray .gitmask.yml or shell setting cannot change the mapping.
    """
    for key in (ENV_MANIFEST, ENV_PROFILE, ENV_VERBOSE):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def default_mapping() -> Mapping:
    """The embedded prodPassword/devPassword mapping."""
    return Mapping.from_pairs(DEFAULT_MAPPING)


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[..., Path]:
    """
    Return a helper that dumps a manifest dict to YAML and returns its path.
    """

    def _write(data: dict, name: str = "manifest.yml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write
