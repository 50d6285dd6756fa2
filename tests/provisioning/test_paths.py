"""
Tests for the enhanced PATH and binary lookup.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from hostprep.core.services.provisioning.detection import paths
from hostprep.core.services.provisioning.detection.paths import (
    common_paths,
    enhanced_path,
    find_tool,
)


@pytest.fixture
def fake_common(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, Path]:
    real = tmp_path / "real"
    real.mkdir()
    link = tmp_path / "link"
    link.symlink_to(real)
    other = tmp_path / "other"
    other.mkdir()
    monkeypatch.setattr(paths.platform, "system", lambda: "Linux")
    monkeypatch.setattr(
        paths,
        "UNIX_COMMON_PATHS",
        (str(link), str(tmp_path / "missing"), str(other)),
    )
    return {"real": real, "link": link, "other": other}


class TestCommonPaths:
    def test_missing_skipped_and_symlinks_resolved(self, fake_common):
        found = common_paths()
        assert found == [
            os.path.realpath(fake_common["real"]),
            os.path.realpath(fake_common["other"]),
        ]

    def test_home_expanded(self, tmp_path: Path, monkeypatch):
        (tmp_path / ".cargo" / "bin").mkdir(parents=True)
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setattr(paths.platform, "system", lambda: "Linux")
        monkeypatch.setattr(paths, "UNIX_COMMON_PATHS", ("~/.cargo/bin",))
        assert common_paths() == [os.path.realpath(tmp_path / ".cargo" / "bin")]


class TestEnhancedPath:
    def test_inherited_path_first(self, fake_common):
        result = enhanced_path("/first:/second").split(os.pathsep)
        assert result[:2] == ["/first", "/second"]
        assert os.path.realpath(fake_common["other"]) in result

    def test_duplicates_dropped(self, fake_common):
        real = os.path.realpath(fake_common["real"])
        result = enhanced_path(real).split(os.pathsep)
        assert result.count(real) == 1

    def test_does_not_touch_environ(self, fake_common, monkeypatch):
        monkeypatch.setenv("PATH", "/only")
        enhanced_path()
        assert os.environ["PATH"] == "/only"


class TestFindTool:
    def test_found(self, make_tool):
        tool = make_tool("pacman")
        info = find_tool("pacman")
        assert info.exists
        assert info.bin == str(tool)

    def test_missing(self, bin_dir):
        info = find_tool("definitely-not-here")
        assert not info.exists
        assert info.bin == ""

    def test_empty_name(self, bin_dir):
        assert not find_tool("").exists

    def test_common_path_consulted(self, tmp_path: Path, monkeypatch):
        extra = tmp_path / "extra"
        extra.mkdir()
        tool = extra / "rustup"
        tool.write_text("#!/bin/sh\n")
        os.chmod(tool, 0o755)
        monkeypatch.setenv("PATH", str(tmp_path / "empty"))
        monkeypatch.setattr(paths, "common_paths", lambda: [str(extra)])
        assert find_tool("rustup").bin == str(tool)
