"""
CLI commands for software repositories.

Thin wrappers over ``orchestrator.process_repositories``.
"""

from __future__ import annotations

import sys

import click

from hostprep.core.models.template import Repository
from hostprep.ui.cli.common import echo_outcomes, get_context


@click.group()
def repo() -> None:
    """Repositories — add or remove through a package manager."""


def _repo_options(func):
    func = click.option("--component", default="", help="Repository component (e.g. main).")(func)
    func = click.option("--channel", default="", help="Release channel (e.g. bookworm).")(func)
    func = click.option("--arch", default=None, help="Architecture (default: this host's).")(func)
    func = click.option("--key-url", default="", help="Signing key URL.")(func)
    func = click.option("--url", default="", help="Repository URL.")(func)
    func = click.option("--manager", "-m", required=True, help="Package manager that owns it.")(func)
    func = click.argument("name")(func)
    return func


def _run(ctx: click.Context, action: str, **fields: str | None) -> None:
    from hostprep.core.services.provisioning.detection.system_info import current_arch
    from hostprep.core.services.provisioning.orchestration.orchestrator import (
        process_repositories,
    )

    if fields.get("arch") is None:
        fields["arch"] = current_arch()

    repository = Repository(
        name=fields["name"],
        package_manager=fields["manager"],
        action=action,
        url=fields["url"],
        key_url=fields["key_url"],
        arch=fields["arch"],
        channel=fields["channel"],
        component=fields["component"],
    )

    click.secho(f"📦 {action.capitalize()} repository {repository.name}...", fg="cyan")
    outcomes = process_repositories(get_context(ctx), [repository])
    if not echo_outcomes(outcomes):
        sys.exit(1)


@repo.command("add")
@_repo_options
@click.pass_context
def add(ctx: click.Context, **fields: str | None) -> None:
    """Add repository NAME."""
    _run(ctx, "add", **fields)


@repo.command("remove")
@_repo_options
@click.pass_context
def remove(ctx: click.Context, **fields: str | None) -> None:
    """Remove repository NAME."""
    _run(ctx, "remove", **fields)
