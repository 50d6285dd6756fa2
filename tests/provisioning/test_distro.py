"""
Tests for distro identity and family resolution.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from hostprep.core.services.provisioning.data import constants
from hostprep.core.services.provisioning.detection.distro import (
    get_distro_family,
    get_distro_id,
    get_distro_id_like,
    get_distro_version,
    is_distro_in_family,
    read_os_release,
)


class TestReadOsRelease:
    def test_parses_quoted_and_bare_values(self, tmp_path: Path):
        path = tmp_path / "os-release"
        path.write_text(
            'NAME="Ubuntu"\n'
            "ID=ubuntu\n"
            "# comment\n"
            "\n"
            "ID_LIKE=debian\n"
            "VERSION_ID='22.04'\n"
        )
        data = read_os_release(path)
        assert data["NAME"] == "Ubuntu"
        assert data["ID"] == "ubuntu"
        assert data["ID_LIKE"] == "debian"
        assert data["VERSION_ID"] == "22.04"

    def test_missing_file_is_empty(self, tmp_path: Path):
        assert read_os_release(tmp_path / "nope") == {}


class TestDistroId:
    def test_id_lowercased(self, os_release):
        os_release(ID="Fedora", VERSION_ID="39")
        assert get_distro_id() == "fedora"
        assert get_distro_version() == "39"

    def test_lsb_release_fallback(self, tmp_path: Path, monkeypatch):
        lsb = tmp_path / "lsb-release"
        lsb.write_text("DISTRIB_ID=LinuxMint\nDISTRIB_RELEASE=21\n")
        monkeypatch.setattr(constants, "OS_RELEASE_PATH", str(tmp_path / "missing"))
        monkeypatch.setattr(constants, "LSB_RELEASE_PATH", str(lsb))
        assert get_distro_id() == "linuxmint"
        assert get_distro_version() == "21"

    def test_neither_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(constants, "OS_RELEASE_PATH", str(tmp_path / "a"))
        monkeypatch.setattr(constants, "LSB_RELEASE_PATH", str(tmp_path / "b"))
        assert get_distro_id() == ""

    def test_id_like_tokens(self, os_release):
        os_release(ID="pop", ID_LIKE="ubuntu debian")
        assert get_distro_id_like() == ["ubuntu", "debian"]


class TestDistroFamily:
    def test_family_key_maps_to_itself(self, os_release):
        os_release(ID="arch")
        assert get_distro_family("arch") == "arch"

    def test_variant_maps_to_family(self, os_release):
        os_release(ID="endeavouros")
        assert get_distro_family("endeavouros") == "arch"

    def test_id_like_fallback(self, os_release):
        os_release(ID="somethingnew", ID_LIKE="fedora")
        assert get_distro_family("somethingnew") == "fedora"

    def test_unknown_returns_input(self, os_release):
        os_release(ID="plan9")
        assert get_distro_family("plan9") == "plan9"

    def test_nested_family_key_maps_to_parent(self, os_release):
        os_release(ID="ubuntu")
        assert get_distro_family("ubuntu") == "debian"
        assert get_distro_family("kubuntu") == "ubuntu"

    @pytest.mark.parametrize(
        ("variant", "family"),
        [(v, f) for f, variants in constants.DISTRO_FAMILIES.items() for v in variants],
    )
    def test_every_listed_variant(self, os_release, variant, family):
        os_release(ID="neutral")
        assert get_distro_family(variant) == family
        assert is_distro_in_family(variant, family)


class TestIsDistroInFamily:
    def test_equal(self, os_release):
        os_release(ID="debian")
        assert is_distro_in_family("debian", "debian")

    def test_listed_variant(self, os_release):
        os_release(ID="manjaro")
        assert is_distro_in_family("manjaro", "arch")

    def test_id_like_token(self, os_release):
        os_release(ID="customos", ID_LIKE="arch")
        assert is_distro_in_family("customos", "arch")

    def test_id_like_is_token_based(self, os_release):
        os_release(ID="customos", ID_LIKE="archlinux")
        assert not is_distro_in_family("customos", "arch")

    def test_unrelated(self, os_release):
        os_release(ID="ubuntu", ID_LIKE="debian")
        assert not is_distro_in_family("ubuntu", "arch")

    def test_nested_variant_reaches_grandparent(self, os_release):
        os_release(ID="kubuntu")
        assert is_distro_in_family("kubuntu", "ubuntu")
        assert is_distro_in_family("kubuntu", "debian")
        assert not is_distro_in_family("kubuntu", "fedora")
