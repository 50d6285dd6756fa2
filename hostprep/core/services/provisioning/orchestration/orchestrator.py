"""
L5 Orchestration — Top-level coordinators.

These functions tie everything together: detect the host, pick the
provider for each request, build its template context, and run the
provider's step sequences or commands.

Batch coordinators (``process_repositories``, ``process_packages``,
``clean_package_managers``) isolate failures: one broken item is
logged and reported in its outcome, and the next item still runs.
A single step sequence is never continued past its first failure.
"""

from __future__ import annotations

import getpass
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from hostprep.core.errors import (
    HostprepError,
    ProviderConfigError,
    ProviderNotFoundError,
)
from hostprep.core.models.command import Command, CommandResult
from hostprep.core.models.provider import Provider, StepSequence
from hostprep.core.models.system import OSInfo, PackageManagerInfo
from hostprep.core.models.template import (
    OperationOutcome,
    Repository,
    StepResult,
    TemplateContext,
)
from hostprep.core.services.provisioning.detection.distro import read_os_release
from hostprep.core.services.provisioning.detection.paths import find_tool
from hostprep.core.services.provisioning.detection.providers import get_available_providers
from hostprep.core.services.provisioning.detection.system_info import detect_system
from hostprep.core.services.provisioning.execution.step_executors import execute_steps
from hostprep.core.services.provisioning.execution.subprocess_runner import run_command
from hostprep.core.services.provisioning.resolver.default_selection import select_default

if TYPE_CHECKING:
    from hostprep.core.context import ProvisionContext

logger = logging.getLogger(__name__)


# ── Detection ───────────────────────────────────────────────────


def detect_os(ctx: ProvisionContext) -> OSInfo:
    """Fresh snapshot of the host and its usable package managers."""
    system = detect_system()
    logger.debug("Detected system: %s", system)

    distro = system.os_family if system.os == "linux" else ""
    available = get_available_providers(ctx.registry, os_name=system.os, distro=distro)

    managers = {
        name: PackageManagerInfo.from_provider(provider, provider.bin_path)
        for name, provider in sorted(available.items())
    }
    os_release = read_os_release() if system.os == "linux" else {}
    default = select_default(managers, system, os_release)

    if default is None:
        logger.warning("No package managers available on %s/%s", system.os, system.os_family)
    else:
        logger.info("Default package manager: %s", default.name)

    return OSInfo(system=system, managers=managers, default=default)


# ── Helpers ─────────────────────────────────────────────────────


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return ""


def _require_provider(ctx: ProvisionContext, name: str) -> Provider:
    """Provider whose binary resolves now.

    Raises:
        ProviderNotFoundError: Unknown name or binary missing.
    """
    provider = ctx.registry.get_provider(name)
    if provider is None:
        raise ProviderNotFoundError(f"Package manager {name} is not available")
    return provider


def run_manager(
    ctx: ProvisionContext,
    manager: PackageManagerInfo,
    operation: str,
    *extra: str,
) -> CommandResult:
    """Run one of ``manager``'s commands (install, update, clean...).

    Raises:
        ProviderConfigError: The manager has no such command.
        CommandError: The command failed.
    """
    try:
        argv = manager.argv(operation, *extra)
    except ValueError as e:
        raise ProviderConfigError(str(e)) from e

    settings = ctx.settings
    cmd = Command(
        exec=argv[0],
        args=argv[1:],
        elevated=manager.elevated,
        interactive=settings.interactive,
        variables=dict(manager.environment),
        log_name=settings.log_file,
    )
    return run_command(cmd, debug=settings.debug, timeout=settings.command_timeout)


# ── Repositories ────────────────────────────────────────────────


def build_repository_context(repo: Repository, provider: Provider) -> TemplateContext:
    """Template variables for one repository operation.

    ``KeyPath`` is ``<keys dir>/<name>.gpg``; ``TempKeyPath`` is the
    same file name in the system temp dir.
    """
    paths = provider.repository.paths
    key_file = f"{repo.name}.gpg"
    return TemplateContext(
        Name=repo.name,
        URL=repo.url,
        KeyURL=repo.key_url,
        Arch=repo.arch,
        Channel=repo.channel,
        Component=repo.component,
        SourcesPath=paths.sources,
        KeyPath=os.path.join(paths.keys, key_file) if paths.keys else "",
        TempKeyPath=os.path.join(tempfile.gettempdir(), key_file),
        Home=str(Path.home()),
        User=_current_user(),
        Bin=provider.bin_path,
    )


def process_repository(ctx: ProvisionContext, repo: Repository) -> list[StepResult]:
    """Add or remove one repository through its provider's steps.

    Repository sequences run elevated, including every command step.

    Raises:
        ProviderNotFoundError: The provider is unknown or unavailable.
        ProviderConfigError: It defines no steps for this action.
        StepExecutionError: A step failed.
    """
    provider = _require_provider(ctx, repo.package_manager)
    sequence = (
        provider.repository.add if repo.action == "add" else provider.repository.remove
    )
    if not sequence.steps:
        raise ProviderConfigError(
            f"Provider {provider.name} defines no repository {repo.action} steps"
        )

    logger.info("Processing repository %s (%s via %s)", repo.name, repo.action, provider.name)
    return execute_steps(
        sequence.steps,
        build_repository_context(repo, provider),
        elevated=True,
        force_elevated=True,
        settings=ctx.settings,
        variables=dict(provider.environment),
    )


def process_repositories(
    ctx: ProvisionContext, repositories: Iterable[Repository],
) -> list[OperationOutcome]:
    """Process every repository, then refresh each manager touched.

    Returns:
        One outcome per repository, followed by one per update command.
    """
    outcomes: list[OperationOutcome] = []
    touched: list[str] = []

    for repo in repositories:
        try:
            steps = process_repository(ctx, repo)
        except HostprepError as e:
            logger.error("Error processing repository %s: %s", repo.name, e)
            outcomes.append(OperationOutcome(name=repo.name, ok=False, error=str(e)))
            continue
        outcomes.append(OperationOutcome(name=repo.name, steps=steps))
        if repo.package_manager not in touched:
            touched.append(repo.package_manager)

    for name in touched:
        outcomes.append(_update_manager(ctx, name))

    return outcomes


def _update_manager(ctx: ProvisionContext, name: str) -> OperationOutcome:
    label = f"{name} update"
    try:
        provider = _require_provider(ctx, name)
        manager = PackageManagerInfo.from_provider(provider, provider.bin_path)
        if not provider.commands.update:
            logger.debug("%s has no update command", name)
            return OperationOutcome(name=label)
        logger.info("Updating %s package lists", name)
        run_manager(ctx, manager, "update")
    except HostprepError as e:
        logger.error("Error updating %s package lists: %s", name, e)
        return OperationOutcome(name=label, ok=False, error=str(e))
    return OperationOutcome(name=label)


# ── Provider install / remove ───────────────────────────────────


def _provider_context(provider: Provider) -> TemplateContext:
    return TemplateContext(
        Name=provider.name,
        Home=str(Path.home()),
        User=_current_user(),
        Bin=provider.bin_path or provider.detection.binary,
    )


def _run_provider_sequence(
    ctx: ProvisionContext, provider: Provider, sequence: StepSequence, label: str,
) -> list[StepResult]:
    if not sequence.steps:
        raise ProviderConfigError(f"Provider {provider.name} defines no {label} steps")

    logger.info("Running %s steps for %s", label, provider.name)
    return execute_steps(
        sequence.steps,
        _provider_context(provider),
        elevated=provider.elevated or ctx.settings.elevated,
        settings=ctx.settings,
        variables=dict(provider.environment),
    )


def install_provider(ctx: ProvisionContext, name: str) -> list[StepResult]:
    """Install the package manager ``name`` itself.

    Nothing runs when its binary already resolves.

    Raises:
        ProviderNotFoundError: Unknown provider.
        ProviderConfigError: No install steps.
        StepExecutionError: A step failed.
    """
    provider = ctx.registry.get(name)
    if provider is None:
        raise ProviderNotFoundError(f"Unknown provider: {name}")

    tool = find_tool(provider.detection.binary)
    if tool.exists:
        logger.info("%s is already installed at %s", name, tool.bin)
        provider.bin_path = tool.bin
        return []

    return _run_provider_sequence(ctx, provider, provider.install, "install")


def remove_provider(ctx: ProvisionContext, name: str) -> list[StepResult]:
    """Uninstall the package manager ``name``.

    Raises:
        ProviderNotFoundError: Unknown provider.
        ProviderConfigError: No remove steps.
        StepExecutionError: A step failed.
    """
    provider = ctx.registry.get(name)
    if provider is None:
        raise ProviderNotFoundError(f"Unknown provider: {name}")

    tool = find_tool(provider.detection.binary)
    if tool.exists:
        provider.bin_path = tool.bin

    return _run_provider_sequence(ctx, provider, provider.remove, "remove")


# ── Packages ────────────────────────────────────────────────────


def install_core_packages(
    ctx: ProvisionContext, os_info: OSInfo, category: str,
) -> CommandResult | None:
    """Install the ``category`` core package group with the default manager.

    Distribution alternatives replace the default package list for the
    category.  Returns ``None`` (after a warning) when there is no
    default manager or it lists no packages for the category.

    Raises:
        CommandError: The install command failed.
    """
    default = os_info.default
    if default is None:
        logger.warning("No default package manager set, skipping %s installation", category)
        return None

    provider = ctx.registry.get(default.name)
    if provider is None:
        logger.warning("No provider found for %s, skipping %s installation", default.name, category)
        return None

    packages = provider.core_packages_for(os_info.system.os_family).get(category, [])
    if not packages:
        logger.warning("No %s packages defined for %s, skipping installation", category, default.name)
        return None

    logger.info("Installing %s packages with %s: %s", category, default.name, packages)
    return run_manager(ctx, default, "install", *packages)


def process_packages(
    ctx: ProvisionContext,
    os_info: OSInfo,
    names: Iterable[str],
    *,
    action: str = "install",
    manager: str | None = None,
) -> list[OperationOutcome]:
    """Install or remove each package separately.

    Args:
        action: ``install`` or ``remove``.
        manager: Detected manager to use; the default when omitted.

    Raises:
        ProviderNotFoundError: The requested manager (or a default) is
            not available.
        ValueError: Unknown action.
    """
    if action not in ("install", "remove"):
        raise ValueError(f"Unknown package action: {action}")

    pm = os_info.get_manager(manager)
    if pm is None:
        raise ProviderNotFoundError(
            f"Package manager {manager} is not available" if manager
            else "No default package manager available"
        )

    outcomes: list[OperationOutcome] = []
    for name in names:
        try:
            run_manager(ctx, pm, action, name)
        except HostprepError as e:
            logger.warning("Error running %s for package %s: %s", action, name, e)
            outcomes.append(OperationOutcome(name=name, ok=False, error=str(e)))
            continue
        logger.info("Package %s: %s done via %s", name, action, pm.name)
        outcomes.append(OperationOutcome(name=name))
    return outcomes


def clean_package_managers(ctx: ProvisionContext, os_info: OSInfo) -> list[OperationOutcome]:
    """Run every detected manager's clean command, continuing past errors."""
    outcomes: list[OperationOutcome] = []
    for name, pm in sorted(os_info.managers.items()):
        if not pm.clean or pm.clean == pm.bin:
            continue

        logger.debug("Running clean command for package manager: %s", name)
        try:
            run_manager(ctx, pm, "clean")
        except HostprepError as e:
            logger.error("Error cleaning package manager %s: %s", name, e)
            outcomes.append(OperationOutcome(name=name, ok=False, error=str(e)))
            continue
        logger.info("Cleaned package manager: %s", name)
        outcomes.append(OperationOutcome(name=name))
    return outcomes
