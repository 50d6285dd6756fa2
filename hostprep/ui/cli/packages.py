"""
CLI commands for installing and removing packages.

Thin wrappers over ``orchestrator.process_packages``.
"""

from __future__ import annotations

import sys

import click

from hostprep.core.errors import HostprepError
from hostprep.ui.cli.common import echo_outcomes, fail, get_context


@click.group()
def packages() -> None:
    """Packages — install or remove with a detected package manager."""


def _run(ctx: click.Context, action: str, names: tuple[str, ...], manager: str | None) -> None:
    from hostprep.core.services.provisioning.orchestration.orchestrator import (
        detect_os,
        process_packages,
    )

    pctx = get_context(ctx)
    try:
        os_info = detect_os(pctx)
        outcomes = process_packages(pctx, os_info, names, action=action, manager=manager)
    except HostprepError as e:
        fail(str(e))

    if not echo_outcomes(outcomes):
        sys.exit(1)


@packages.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--manager", "-m", default=None, help="Package manager (default: auto-detect).")
@click.pass_context
def install(ctx: click.Context, names: tuple[str, ...], manager: str | None) -> None:
    """Install NAMES one by one."""
    _run(ctx, "install", names, manager)


@packages.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--manager", "-m", default=None, help="Package manager (default: auto-detect).")
@click.pass_context
def remove(ctx: click.Context, names: tuple[str, ...], manager: str | None) -> None:
    """Remove NAMES one by one."""
    _run(ctx, "remove", names, manager)
