"""
Helpers shared by the CLI command groups.
"""

from __future__ import annotations

import sys
from typing import NoReturn

import click

from hostprep.core.context import ProvisionContext
from hostprep.core.models.template import OperationOutcome, StepResult


def get_context(ctx: click.Context) -> ProvisionContext:
    """The run context built by the root ``cli`` group."""
    return ctx.obj["context"]


def fail(message: str) -> NoReturn:
    click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)


def echo_steps(steps: list[StepResult]) -> None:
    for step in steps:
        click.echo(f"   {step.index + 1}. {step.action:<9} {step.detail}")


def echo_outcomes(outcomes: list[OperationOutcome]) -> bool:
    """Print one line per outcome.  Returns True when all succeeded."""
    all_ok = True
    for outcome in outcomes:
        if outcome.ok:
            click.secho(f"✅ {outcome.name}", fg="green")
            echo_steps(outcome.steps)
        else:
            all_ok = False
            click.secho(f"❌ {outcome.name}: {outcome.error}", fg="red")
    return all_ok
