"""
L4 Execution — Step executors.

Each ``_execute_*_step`` function handles one step type and returns a
short detail string for the step record.  ``execute_steps`` runs a
sequence in order and stops at the first failure; there is no rollback
and no retry.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from hostprep.core.errors import ExecutionError, StepExecutionError
from hostprep.core.models.command import Command
from hostprep.core.models.provider import (
    ActionStep,
    ChmodStep,
    ChownStep,
    CommandStep,
    CopyStep,
    DownloadStep,
    MkdirStep,
    RemoveStep,
    SymlinkStep,
    WriteStep,
)
from hostprep.core.models.settings import Settings
from hostprep.core.models.template import StepResult, TemplateContext
from hostprep.core.services.provisioning.execution import file_ops
from hostprep.core.services.provisioning.execution.download import fetch_to
from hostprep.core.services.provisioning.execution.subprocess_runner import run_command
from hostprep.core.services.provisioning.execution.templates import render, render_all

logger = logging.getLogger(__name__)


def _path(template: str, context: TemplateContext) -> Path:
    rendered = render(template, context)
    if not rendered:
        raise ExecutionError(f"Path template {template!r} rendered empty")
    return Path(rendered).expanduser()


def _execute_download_step(
    step: DownloadStep,
    context: TemplateContext,
    *,
    elevated: bool,
    settings: Settings,
    variables: dict[str, str],
) -> str:
    """Fetch into a temp file, then move it over ``dest``."""
    url = render(step.source, context)
    dest = _path(step.dest, context)

    tmp = file_ops.make_temp_near(dest)
    try:
        size = fetch_to(url, tmp, timeout=settings.download_timeout)
        file_ops.atomic_relocate(
            tmp, dest, elevated=elevated, timeout=settings.command_timeout,
        )
    finally:
        if tmp.exists():
            tmp.unlink()
    return f"downloaded {size} bytes to {dest}"


def _execute_command_step(
    step: CommandStep,
    context: TemplateContext,
    *,
    elevated: bool,
    settings: Settings,
    variables: dict[str, str],
    force_elevated: bool = False,
) -> str:
    """Run the rendered command.

    ``step.elevated`` overrides the sequence default unless
    ``force_elevated`` is set.
    """
    rendered = render(step.exec, context)
    try:
        parts = shlex.split(rendered)
    except ValueError as e:
        raise ExecutionError(f"Cannot split command {rendered!r}: {e}") from e
    if not parts:
        raise ExecutionError(f"Command template {step.exec!r} rendered empty")

    cmd = Command(
        exec=parts[0],
        args=parts[1:] + render_all(step.args, context),
        elevated=force_elevated or (elevated if step.elevated is None else step.elevated),
        interactive=settings.interactive,
        variables=variables,
        log_name=settings.log_file,
    )
    run_command(cmd, debug=settings.debug, timeout=settings.command_timeout)
    return shlex.join([cmd.exec, *cmd.args])


def _execute_write_step(
    step: WriteStep,
    context: TemplateContext,
    *,
    elevated: bool,
    settings: Settings,
    variables: dict[str, str],
) -> str:
    dest = _path(step.dest, context)
    content = render(step.content, context)
    file_ops.atomic_write(dest, content, elevated=elevated, timeout=settings.command_timeout)
    return f"wrote {dest}"


def _execute_remove_step(
    step: RemoveStep,
    context: TemplateContext,
    *,
    elevated: bool,
    settings: Settings,
    variables: dict[str, str],
) -> str:
    dest = _path(step.dest, context)
    if file_ops.remove(dest, elevated=elevated, timeout=settings.command_timeout):
        return f"removed {dest}"
    return f"{dest} already absent"


def _execute_mkdir_step(
    step: MkdirStep,
    context: TemplateContext,
    *,
    elevated: bool,
    settings: Settings,
    variables: dict[str, str],
) -> str:
    dest = _path(step.dest, context)
    mode = render(step.mode, context)
    file_ops.mkdir(dest, mode, elevated=elevated, timeout=settings.command_timeout)
    return f"created {dest}"


def _execute_chmod_step(
    step: ChmodStep,
    context: TemplateContext,
    *,
    elevated: bool,
    settings: Settings,
    variables: dict[str, str],
) -> str:
    dest = _path(step.dest, context)
    mode = render(step.mode, context)
    file_ops.chmod(dest, mode, elevated=elevated, timeout=settings.command_timeout)
    return f"{dest} mode {mode}"


def _execute_chown_step(
    step: ChownStep,
    context: TemplateContext,
    *,
    elevated: bool,
    settings: Settings,
    variables: dict[str, str],
) -> str:
    dest = _path(step.dest, context)
    owner = render(step.owner, context)
    group = render(step.group, context)
    file_ops.chown(dest, owner, group, elevated=elevated, timeout=settings.command_timeout)
    return f"{dest} owned by {owner}:{group}" if group else f"{dest} owned by {owner}"


def _execute_symlink_step(
    step: SymlinkStep,
    context: TemplateContext,
    *,
    elevated: bool,
    settings: Settings,
    variables: dict[str, str],
) -> str:
    source = render(step.source, context)
    dest = _path(step.dest, context)
    file_ops.symlink(source, dest, elevated=elevated, timeout=settings.command_timeout)
    return f"{dest} -> {source}"


def _execute_copy_step(
    step: CopyStep,
    context: TemplateContext,
    *,
    elevated: bool,
    settings: Settings,
    variables: dict[str, str],
) -> str:
    source = _path(step.source, context)
    dest = _path(step.dest, context)
    file_ops.copy(source, dest, elevated=elevated, timeout=settings.command_timeout)
    return f"copied {source} to {dest}"


_EXECUTORS: dict[type, Callable[..., str]] = {
    DownloadStep: _execute_download_step,
    CommandStep: _execute_command_step,
    WriteStep: _execute_write_step,
    RemoveStep: _execute_remove_step,
    MkdirStep: _execute_mkdir_step,
    ChmodStep: _execute_chmod_step,
    ChownStep: _execute_chown_step,
    SymlinkStep: _execute_symlink_step,
    CopyStep: _execute_copy_step,
}


def execute_steps(
    steps: Iterable[ActionStep],
    context: TemplateContext,
    *,
    elevated: bool = False,
    force_elevated: bool = False,
    settings: Settings | None = None,
    variables: dict[str, str] | None = None,
) -> list[StepResult]:
    """Run ``steps`` in order against ``context``.

    Args:
        steps: The sequence to run.
        context: Template variables shared by every step.
        elevated: Default elevation for command steps, and whether file
            operations may fall back to elevated commands.
        force_elevated: Run every command step elevated, ignoring the
            step's own ``elevated`` flag.
        settings: Run flags (timeouts, debug, interactive, log file).
        variables: Extra environment for command steps.

    Returns:
        One ``StepResult`` per step, in order.

    Raises:
        StepExecutionError: A step failed; later steps did not run.
            The underlying error is chained.
    """
    settings = settings or Settings()
    step_list = list(steps)
    results: list[StepResult] = []

    for index, step in enumerate(step_list):
        action = getattr(step, "action", type(step).__name__)
        executor = _EXECUTORS.get(type(step))
        if executor is None:
            raise StepExecutionError(index, action, f"no executor for {type(step).__name__}")

        logger.debug("Step %d/%d: %s", index + 1, len(step_list), action)
        kwargs: dict[str, Any] = {
            "elevated": elevated,
            "settings": settings,
            "variables": variables or {},
        }
        if isinstance(step, CommandStep):
            kwargs["force_elevated"] = force_elevated
        try:
            detail = executor(step, context, **kwargs)
        except ExecutionError as e:
            logger.error("Step %d (%s) failed: %s", index + 1, action, e)
            raise StepExecutionError(index, action, str(e)) from e

        logger.debug("Step %d done: %s", index + 1, detail)
        results.append(StepResult(index=index, action=action, detail=detail))

    return results
