"""
Tests for the top-level coordinators — failure isolation and wiring.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from hostprep.core.errors import CommandError, ProviderNotFoundError
from hostprep.core.models.command import CommandResult
from hostprep.core.models.system import OSInfo, PackageManagerInfo, SystemInfo
from hostprep.core.models.template import Repository
from hostprep.core.services.provisioning.orchestration import orchestrator
from hostprep.core.services.provisioning.orchestration.orchestrator import (
    build_repository_context,
    clean_package_managers,
    detect_os,
    install_core_packages,
    install_provider,
    process_packages,
    process_repositories,
    remove_provider,
)

MODULE = "hostprep.core.services.provisioning.orchestration.orchestrator"


def _ok(cmd, **kwargs):
    return CommandResult(argv=[cmd.exec, *cmd.args])


@pytest.fixture
def apt(make_provider, tmp_path: Path):
    return make_provider(
        "apt",
        elevated=True,
        detection={"binary": "apt-get", "distributions": ["debian", "ubuntu"]},
        commands={"install": "install -y", "update": "update", "remove": "remove -y", "clean": "clean"},
        environment={"DEBIAN_FRONTEND": "noninteractive"},
        repository={
            "paths": {"sources": str(tmp_path / "sources.list.d"), "keys": str(tmp_path / "keyrings")},
            "add": {"steps": [{
                "action": "write",
                "dest": "{{SourcesPath}}/{{Name}}.list",
                "content": "deb {{URL}} {{Channel}} {{Component}}\n",
            }]},
            "remove": {"steps": [{"action": "remove", "dest": "{{SourcesPath}}/{{Name}}.list"}]},
        },
        corePackages={"build-essentials": ["build-essential"], "openssl": ["openssl"]},
        alternatives={"kali": {"corePackages": {"openssl": ["openssl", "libssl-dev"]}}},
    )


def _os_info(*managers: PackageManagerInfo, family: str = "debian") -> OSInfo:
    by_name = {m.name: m for m in managers}
    return OSInfo(
        system=SystemInfo(os="linux", os_family=family),
        managers=by_name,
        default=managers[0] if managers else None,
    )


class TestRepositoryContext:
    def test_key_paths(self, apt, tmp_path: Path):
        repo = Repository(name="docker", package_manager="apt", url="https://x", arch="amd64")
        ctx = build_repository_context(repo, apt)
        assert ctx.Name == "docker"
        assert ctx.SourcesPath == str(tmp_path / "sources.list.d")
        assert ctx.KeyPath == os.path.join(str(tmp_path / "keyrings"), "docker.gpg")
        assert ctx.TempKeyPath == os.path.join(tempfile.gettempdir(), "docker.gpg")

    def test_no_keys_dir(self, make_provider):
        repo = Repository(name="tap", package_manager="brew")
        assert build_repository_context(repo, make_provider("brew")).KeyPath == ""


class TestProcessRepositories:
    def test_failure_isolated_and_update_runs(
        self, provision_ctx, apt, make_tool, tmp_path: Path,
    ):
        provision_ctx.registry.register(apt)
        make_tool("apt-get")
        repos = [
            Repository(name="ghost", package_manager="zypper"),
            Repository(name="docker", package_manager="apt", url="https://d", channel="bookworm", component="stable"),
        ]

        with patch(f"{MODULE}.run_command", side_effect=_ok) as mock_run:
            outcomes = process_repositories(provision_ctx, repos)

        assert [o.name for o in outcomes] == ["ghost", "docker", "apt update"]
        assert [o.ok for o in outcomes] == [False, True, True]
        assert "zypper" in outcomes[0].error
        assert (tmp_path / "sources.list.d" / "docker.list").read_text() == "deb https://d bookworm stable\n"

        update = mock_run.call_args.args[0]
        assert update.args == ["update"]
        assert update.elevated is True
        assert update.variables == {"DEBIAN_FRONTEND": "noninteractive"}

    def test_remove_action(self, provision_ctx, apt, make_tool, tmp_path: Path):
        provision_ctx.registry.register(apt)
        make_tool("apt-get")
        target = tmp_path / "sources.list.d" / "docker.list"
        target.parent.mkdir()
        target.write_text("deb x\n")

        with patch(f"{MODULE}.run_command", side_effect=_ok):
            outcomes = process_repositories(
                provision_ctx, [Repository(name="docker", package_manager="apt", action="remove")],
            )

        assert outcomes[0].ok
        assert not target.exists()

    def test_update_failure_reported(self, provision_ctx, apt, make_tool):
        provision_ctx.registry.register(apt)
        make_tool("apt-get")
        failure = CommandError("Command failed (exit 100)", returncode=100)

        with patch(f"{MODULE}.run_command", side_effect=failure):
            outcomes = process_repositories(
                provision_ctx, [Repository(name="docker", package_manager="apt", url="u")],
            )

        assert outcomes[0].ok
        assert not outcomes[1].ok

    def test_unsplittable_command_isolated(
        self, provision_ctx, apt, make_provider, make_tool, tmp_path: Path,
    ):
        provision_ctx.registry.register(make_provider(
            "bad",
            repository={"add": {"steps": [{"action": "command", "exec": "echo {{Name}}"}]}},
        ))
        provision_ctx.registry.register(apt)
        make_tool("bad")
        make_tool("apt-get")
        repos = [
            Repository(name="o'brien", package_manager="bad"),
            Repository(name="two", package_manager="apt", url="https://d", channel="c", component="main"),
        ]

        with patch(f"{MODULE}.run_command", side_effect=_ok):
            outcomes = process_repositories(provision_ctx, repos)

        assert [(o.name, o.ok) for o in outcomes] == [
            ("o'brien", False), ("two", True), ("apt update", True),
        ]
        assert "Cannot split command" in outcomes[0].error
        assert (tmp_path / "sources.list.d" / "two.list").read_text() == "deb https://d c main\n"

    def test_no_steps_defined(self, provision_ctx, make_provider, make_tool):
        provision_ctx.registry.register(make_provider("snap"))
        make_tool("snap")
        outcomes = process_repositories(provision_ctx, [Repository(name="x", package_manager="snap")])
        assert not outcomes[0].ok
        assert "no repository add steps" in outcomes[0].error


class TestPackages:
    def test_one_failure_does_not_stop_the_rest(self, provision_ctx, apt):
        pm = PackageManagerInfo.from_provider(apt, "/usr/bin/apt-get")
        failure = CommandError("Command failed (exit 100)", returncode=100)

        with patch(f"{MODULE}.run_command", side_effect=[failure, CommandResult(argv=[])]) as mock_run:
            outcomes = process_packages(provision_ctx, _os_info(pm), ["nope", "git"])

        assert [(o.name, o.ok) for o in outcomes] == [("nope", False), ("git", True)]
        last = mock_run.call_args.args[0]
        assert [last.exec, *last.args] == ["/usr/bin/apt-get", "install", "-y", "git"]

    def test_unknown_manager(self, provision_ctx, apt):
        pm = PackageManagerInfo.from_provider(apt, "/usr/bin/apt-get")
        with pytest.raises(ProviderNotFoundError):
            process_packages(provision_ctx, _os_info(pm), ["git"], manager="brew")

    def test_no_default(self, provision_ctx):
        with pytest.raises(ProviderNotFoundError):
            process_packages(provision_ctx, _os_info(), ["git"])

    def test_clean_continues_past_errors(self, provision_ctx, apt, make_provider):
        apt_pm = PackageManagerInfo.from_provider(apt, "/usr/bin/apt-get")
        brew = make_provider("brew", commands={"clean": "cleanup"})
        brew_pm = PackageManagerInfo.from_provider(brew, "/usr/local/bin/brew")
        pip_pm = PackageManagerInfo.from_provider(make_provider("pip"), "/usr/bin/pip")
        failure = CommandError("boom")

        with patch(f"{MODULE}.run_command", side_effect=[failure, CommandResult(argv=[])]) as mock_run:
            outcomes = clean_package_managers(provision_ctx, _os_info(apt_pm, brew_pm, pip_pm))

        assert [(o.name, o.ok) for o in outcomes] == [("apt", False), ("brew", True)]
        assert mock_run.call_count == 2


class TestCorePackages:
    def test_default_packages(self, provision_ctx, apt):
        provision_ctx.registry.register(apt)
        pm = PackageManagerInfo.from_provider(apt, "/usr/bin/apt-get")
        with patch(f"{MODULE}.run_command", side_effect=_ok) as mock_run:
            install_core_packages(provision_ctx, _os_info(pm), "openssl")
        assert mock_run.call_args.args[0].args == ["install", "-y", "openssl"]

    def test_alternatives_override(self, provision_ctx, apt):
        provision_ctx.registry.register(apt)
        pm = PackageManagerInfo.from_provider(apt, "/usr/bin/apt-get")
        with patch(f"{MODULE}.run_command", side_effect=_ok) as mock_run:
            install_core_packages(provision_ctx, _os_info(pm, family="kali"), "openssl")
        assert mock_run.call_args.args[0].args == ["install", "-y", "openssl", "libssl-dev"]

    def test_unknown_category_skipped(self, provision_ctx, apt):
        provision_ctx.registry.register(apt)
        pm = PackageManagerInfo.from_provider(apt, "/usr/bin/apt-get")
        with patch(f"{MODULE}.run_command") as mock_run:
            assert install_core_packages(provision_ctx, _os_info(pm), "fonts") is None
        mock_run.assert_not_called()

    def test_no_default(self, provision_ctx):
        assert install_core_packages(provision_ctx, _os_info(), "openssl") is None


class TestProviderInstall:
    def _paru(self, make_provider):
        return make_provider(
            "paru",
            install={"steps": [{"action": "command", "exec": "git", "args": ["clone", "https://aur.archlinux.org/{{Name}}.git"]}]},
            remove={"steps": [{"action": "command", "exec": "pacman", "args": ["-Rns", "--noconfirm", "{{Name}}"], "elevated": True}]},
        )

    def test_already_installed(self, provision_ctx, make_provider, make_tool):
        provision_ctx.registry.register(self._paru(make_provider))
        make_tool("paru")
        with patch(f"{MODULE}.execute_steps") as mock_exec:
            assert install_provider(provision_ctx, "paru") == []
        mock_exec.assert_not_called()

    def test_runs_install_steps(self, provision_ctx, make_provider, bin_dir):
        provision_ctx.registry.register(self._paru(make_provider))
        runner = "hostprep.core.services.provisioning.execution.step_executors.run_command"
        with patch(runner, side_effect=_ok) as mock_run:
            results = install_provider(provision_ctx, "paru")
        assert len(results) == 1
        cmd = mock_run.call_args.args[0]
        assert cmd.args == ["clone", "https://aur.archlinux.org/paru.git"]
        assert cmd.elevated is False

    def test_remove_uses_step_elevation(self, provision_ctx, make_provider, make_tool):
        provision_ctx.registry.register(self._paru(make_provider))
        make_tool("paru")
        runner = "hostprep.core.services.provisioning.execution.step_executors.run_command"
        with patch(runner, side_effect=_ok) as mock_run:
            remove_provider(provision_ctx, "paru")
        assert mock_run.call_args.args[0].elevated is True

    def test_unknown_provider(self, provision_ctx, make_provider):
        provision_ctx.registry.register(make_provider("apt"))
        with pytest.raises(ProviderNotFoundError):
            install_provider(provision_ctx, "nope")


class TestDetectOs:
    def test_builds_managers_and_default(
        self, provision_ctx, apt, make_provider, make_tool, os_release, monkeypatch,
    ):
        os_release(ID="ubuntu", ID_LIKE="debian")
        monkeypatch.setattr(
            orchestrator, "detect_system",
            lambda: SystemInfo(os="linux", os_family="ubuntu", arch="amd64"),
        )
        provision_ctx.registry.register(apt)
        provision_ctx.registry.register(make_provider(
            "flatpak", detection={"binary": "flatpak", "distributions": ["linux"]},
        ))
        apt_bin = make_tool("apt-get")
        make_tool("flatpak")

        os_info = detect_os(provision_ctx)

        assert sorted(os_info.managers) == ["apt", "flatpak"]
        assert os_info.default.name == "apt"
        assert os_info.managers["apt"].install == f"{apt_bin} install -y"
