"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called for provisioning
operations.  Elevation, environment, output routing, and error
handling are centralised here.

Argument vectors go to ``subprocess`` as lists; nothing is joined into
a shell string.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from typing import IO

from hostprep.core.errors import CommandError
from hostprep.core.models.command import Command, CommandResult
from hostprep.core.services.provisioning.detection.paths import enhanced_path, find_tool
from hostprep.core.services.provisioning.detection.system_info import current_os

logger = logging.getLogger(__name__)


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def build_argv(cmd: Command) -> list[str]:
    """Argument vector for ``cmd`` including any elevation prefix."""
    base = [cmd.exec, *cmd.args]

    if cmd.elevated:
        if current_os() == "windows":
            return ["cmd", "/C", *base]
        if _is_root():
            # Already root, no sudo prefix
            return base
        return ["sudo", *base]

    if cmd.as_user:
        return ["sudo", "-u", cmd.as_user, *base]

    return base


def build_env(variables: dict[str, str] | None = None) -> dict[str, str]:
    """Inherited environment plus ``variables``, with the enhanced PATH."""
    env = os.environ.copy()
    if variables:
        for key, value in variables.items():
            env[key] = os.path.expandvars(value)
    env["PATH"] = enhanced_path(env.get("PATH", ""))
    return env


def _as_text(data: str | bytes | None) -> str:
    if not data:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def run_command(
    cmd: Command,
    *,
    debug: bool = False,
    timeout: float | None = None,
) -> CommandResult:
    """Run ``cmd`` and wait for it.

    Output routing:
      - ``interactive``: stdin and stdout attach to the terminal
      - ``capture``: stdout is returned in the result
      - ``debug``: stdout streams to the caller's stdout
      - ``log_name``: stdout is appended to that file
      - otherwise stdout is discarded

    stderr is always captured and kept verbatim on results and errors.

    Raises:
        CommandError: The executable is missing, the command timed
            out, or it exited non-zero.
    """
    argv = build_argv(cmd)
    env = build_env(cmd.variables)
    display = shlex.join(argv)

    logger.debug("Executing command: %s", display)

    stdin: int | None = None if cmd.interactive else subprocess.DEVNULL
    stdout: int | IO[str] | None
    log_fh: IO[str] | None = None

    if cmd.capture:
        stdout = subprocess.PIPE
    elif cmd.interactive or debug:
        stdout = None
    elif cmd.log_name:
        try:
            log_fh = open(cmd.log_name, "a", encoding="utf-8")
        except OSError as e:
            raise CommandError(f"Cannot open log file {cmd.log_name}: {e}", argv=argv) from e
        stdout = log_fh
    else:
        stdout = subprocess.DEVNULL

    # ── Execute ──
    start = time.monotonic()
    try:
        result = subprocess.run(
            argv,
            stdin=stdin,
            stdout=stdout,
            stderr=subprocess.PIPE,
            text=True,
            env=env,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise CommandError(f"Executable not found: {argv[0]}", argv=argv) from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(
            f"Command timed out ({timeout}s): {display}",
            argv=argv,
            stderr=_as_text(e.stderr),
        ) from e
    except OSError as e:
        raise CommandError(f"Failed to start {display}: {e}", argv=argv) from e
    finally:
        if log_fh is not None:
            log_fh.close()

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stderr = _as_text(result.stderr)

    if result.returncode != 0:
        raise CommandError(
            f"Command failed (exit {result.returncode}): {display}",
            argv=argv,
            returncode=result.returncode,
            stderr=stderr,
        )

    logger.debug("Command finished in %dms: %s", elapsed_ms, display)
    return CommandResult(
        argv=argv,
        returncode=result.returncode,
        stdout=(result.stdout or "") if cmd.capture else "",
        stderr=stderr,
        elapsed_ms=elapsed_ms,
    )


def command_exists(name: str) -> bool:
    return find_tool(name).exists


def get_bin_path(name: str) -> str:
    """Resolved path of ``name`` on the enhanced PATH.

    Raises:
        CommandError: ``name`` is not found.
    """
    tool = find_tool(name)
    if not tool.exists:
        raise CommandError(f"{name} not found in PATH")
    return tool.bin
