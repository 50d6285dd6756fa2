"""
CLI commands for the provider registry.

Thin wrappers over ``hostprep.core.services.provisioning.registry``.
"""

from __future__ import annotations

import json
from pathlib import Path

import click
import yaml

from hostprep.core.errors import HostprepError
from hostprep.ui.cli.common import fail, get_context


@click.group()
def providers() -> None:
    """Providers — list, show, export definitions."""


@providers.command("list")
@click.option("--available", is_flag=True, help="Only providers usable on this host.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_providers(ctx: click.Context, available: bool, as_json: bool) -> None:
    """List loaded provider definitions."""
    from hostprep.core.services.provisioning.detection.providers import get_available_providers

    pctx = get_context(ctx)
    try:
        if available:
            items = list(get_available_providers(pctx.registry).values())
        else:
            items = pctx.registry.all()
    except HostprepError as e:
        fail(str(e))

    if as_json:
        click.echo(json.dumps(
            [
                {
                    "name": p.name,
                    "binary": p.detection.binary,
                    "distributions": p.detection.distributions,
                    "elevated": p.elevated,
                    "bin_path": p.bin_path,
                }
                for p in items
            ],
            indent=2,
        ))
        return

    if not items:
        click.secho("⚠️  No providers found", fg="yellow")
        return

    click.secho(f"📦 Providers ({len(items)}):", fg="cyan", bold=True)
    for p in items:
        where = f"  → {p.bin_path}" if p.bin_path else ""
        click.echo(f"   {p.name:<12} {p.detection.binary:<14} {', '.join(p.detection.distributions)}{where}")


@providers.command("show")
@click.argument("name")
@click.pass_context
def show_provider(ctx: click.Context, name: str) -> None:
    """Print one provider definition as YAML."""
    pctx = get_context(ctx)
    try:
        provider = pctx.registry.get(name)
    except HostprepError as e:
        fail(str(e))

    if provider is None:
        fail(f"Unknown provider: {name}")

    data = {"provider": provider.model_dump(mode="json", by_alias=True)}
    click.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), nl=False)


@providers.command("export")
@click.argument("directory", type=click.Path(file_okay=False, path_type=Path))
@click.option("--force", is_flag=True, help="Overwrite existing files.")
def export_providers(directory: Path, force: bool) -> None:
    """Copy the built-in definitions into DIRECTORY for editing."""
    from hostprep.core.services.provisioning.registry import builtin_definition_files

    directory.mkdir(parents=True, exist_ok=True)
    written = skipped = 0
    for filename, text in builtin_definition_files().items():
        target = directory / filename
        if target.exists() and not force:
            skipped += 1
            continue
        target.write_text(text, encoding="utf-8")
        written += 1

    click.secho(f"✅ Exported {written} definitions to {directory}", fg="green")
    if skipped:
        click.echo(f"   {skipped} existing files kept (use --force to overwrite)")
