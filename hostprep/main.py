"""
hostprep — CLI entrypoint.

Usage:
    hostprep --help
    hostprep detect
    hostprep repo add docker --manager apt --url https://download.docker.com/linux/debian \\
        --key-url https://download.docker.com/linux/debian/gpg --channel bookworm --component stable
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from hostprep import __version__
from hostprep.core.errors import HostprepError
from hostprep.core.observability.logging_config import resolve_level, setup_logging
from hostprep.ui.cli.common import echo_outcomes, fail, get_context
from hostprep.ui.cli.manager import manager
from hostprep.ui.cli.packages import packages
from hostprep.ui.cli.providers import providers
from hostprep.ui.cli.repo import repo


@click.group()
@click.version_option(version=__version__, prog_name="hostprep")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging and show command output.")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to hostprep.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """hostprep — detect package managers and provision this machine."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        flag_level = "DEBUG"
    elif verbose:
        flag_level = "INFO"
    elif quiet:
        flag_level = "ERROR"
    else:
        flag_level = None
    setup_logging(level=resolve_level(flag_level))

    # ── Run context (tests may inject one) ──────────────────────
    if "context" not in ctx.obj:
        from hostprep.core.config.loader import load_settings
        from hostprep.core.context import ProvisionContext

        try:
            settings = load_settings(Path(config_path) if config_path else None)
        except HostprepError as e:
            fail(str(e))
        if debug:
            settings = settings.model_copy(update={"debug": True})
        ctx.obj["context"] = ProvisionContext.from_settings(settings)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Show the host identity and usable package managers."""
    from hostprep.core.services.provisioning.orchestration.orchestrator import detect_os

    try:
        os_info = detect_os(get_context(ctx))
    except HostprepError as e:
        fail(str(e))

    if as_json:
        click.echo(json.dumps(os_info.model_dump(mode="json"), indent=2))
        return

    system = os_info.system
    click.secho(f"\n🖥️  {system.os} / {system.os_family} {system.os_version} ({system.arch})", fg="cyan", bold=True)

    if not os_info.managers:
        click.secho("   ⚠️  No package managers detected", fg="yellow")
        click.echo()
        return

    click.secho(f"   Package managers: {len(os_info.managers)}", fg="white", bold=True)
    default_name = os_info.default.name if os_info.default else ""
    for name, pm in sorted(os_info.managers.items()):
        marker = " ← default" if name == default_name else ""
        click.echo(f"     • {name:<12} {pm.bin}{marker}")
    click.echo()


@cli.command("core-packages")
@click.argument("category")
@click.pass_context
def core_packages(ctx: click.Context, category: str) -> None:
    """Install a core package group (e.g. build-essentials, openssl)."""
    from hostprep.core.services.provisioning.orchestration.orchestrator import (
        detect_os,
        install_core_packages,
    )

    pctx = get_context(ctx)
    try:
        os_info = detect_os(pctx)
        result = install_core_packages(pctx, os_info, category)
    except HostprepError as e:
        fail(str(e))

    if result is None:
        click.secho(f"⚠️  Nothing to install for {category}", fg="yellow")
        return
    click.secho(f"✅ Installed {category} ({result.elapsed_ms}ms)", fg="green", bold=True)


@cli.command()
@click.pass_context
def clean(ctx: click.Context) -> None:
    """Run the clean command of every detected package manager."""
    from hostprep.core.services.provisioning.orchestration.orchestrator import (
        clean_package_managers,
        detect_os,
    )

    pctx = get_context(ctx)
    try:
        os_info = detect_os(pctx)
    except HostprepError as e:
        fail(str(e))

    outcomes = clean_package_managers(pctx, os_info)
    if not outcomes:
        click.secho("⚠️  No package managers to clean", fg="yellow")
        return
    if not echo_outcomes(outcomes):
        sys.exit(1)


cli.add_command(providers)
cli.add_command(repo)
cli.add_command(manager)
cli.add_command(packages)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
