"""
CLI commands that install or remove a package manager itself.
"""

from __future__ import annotations

import click

from hostprep.core.errors import HostprepError
from hostprep.ui.cli.common import echo_steps, fail, get_context


@click.group()
def manager() -> None:
    """Package managers — install or remove one."""


@manager.command()
@click.argument("name")
@click.pass_context
def install(ctx: click.Context, name: str) -> None:
    """Run the install steps of provider NAME."""
    from hostprep.core.services.provisioning.orchestration.orchestrator import install_provider

    click.secho(f"📦 Installing {name}...", fg="cyan")
    try:
        steps = install_provider(get_context(ctx), name)
    except HostprepError as e:
        fail(str(e))

    if not steps:
        click.secho(f"✅ {name} is already installed", fg="green")
        return
    echo_steps(steps)
    click.secho(f"✅ Installed {name}", fg="green", bold=True)


@manager.command()
@click.argument("name")
@click.pass_context
def remove(ctx: click.Context, name: str) -> None:
    """Run the remove steps of provider NAME."""
    from hostprep.core.services.provisioning.orchestration.orchestrator import remove_provider

    click.secho(f"📦 Removing {name}...", fg="cyan")
    try:
        steps = remove_provider(get_context(ctx), name)
    except HostprepError as e:
        fail(str(e))

    echo_steps(steps)
    click.secho(f"✅ Removed {name}", fg="green", bold=True)
