"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import pytest

from hostprep.core.context import ProvisionContext
from hostprep.core.models.provider import Provider
from hostprep.core.models.settings import Settings
from hostprep.core.services.provisioning.data import constants
from hostprep.core.services.provisioning.detection import paths
from hostprep.core.services.provisioning.registry import ProviderRegistry


@pytest.fixture
def os_release(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., Path]:
    """Point os-release lookups at a temp file built from keyword args.

    ``os_release(ID="endeavouros", ID_LIKE="arch")``
    """
    monkeypatch.setattr(constants, "LSB_RELEASE_PATH", str(tmp_path / "no-lsb-release"))

    def _write(**fields: str) -> Path:
        path = tmp_path / "os-release"
        path.write_text("".join(f'{k}="{v}"\n' for k, v in fields.items()))
        monkeypatch.setattr(constants, "OS_RELEASE_PATH", str(path))
        return path

    return _write


@pytest.fixture
def bin_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An isolated PATH: only this directory, no common paths."""
    d = tmp_path / "bin"
    d.mkdir()
    monkeypatch.setenv("PATH", str(d))
    monkeypatch.setattr(paths, "common_paths", lambda: [])
    return d


@pytest.fixture
def make_tool(bin_dir: Path) -> Callable[[str], Path]:
    """Create an executable stub named ``name`` on the isolated PATH."""

    def _make(name: str) -> Path:
        tool = bin_dir / name
        tool.write_text("#!/bin/sh\nexit 0\n")
        os.chmod(tool, 0o755)
        return tool

    return _make


@pytest.fixture
def make_provider() -> Callable[..., Provider]:
    """Build a Provider from a name plus raw definition fields."""

    def _make(name: str, **fields) -> Provider:
        data = {"name": name, "detection": {"binary": name}}
        data.update(fields)
        return Provider.model_validate(data)

    return _make


@pytest.fixture
def registry() -> ProviderRegistry:
    """Empty registry that never touches built-ins or the filesystem."""
    return ProviderRegistry(search_dirs=[], load_builtins=False)


@pytest.fixture
def provision_ctx(registry: ProviderRegistry) -> ProvisionContext:
    return ProvisionContext(settings=Settings(), registry=registry)
