"""
Error hierarchy — every failure hostprep raises on purpose.

Configuration problems are raised at load time, before anything runs.
Execution problems abort the step sequence they occur in and propagate
to the orchestrator, which decides whether the next independent
operation still runs.
"""

from __future__ import annotations


class HostprepError(Exception):
    """Base class for all hostprep errors."""


class ProviderConfigError(HostprepError):
    """A provider definition or one of its steps is malformed."""


class SettingsError(HostprepError):
    """The run settings file is missing, unreadable, or invalid."""


class ProviderNotFoundError(HostprepError):
    """A named provider is unknown, or its binary cannot be resolved."""


class ExecutionError(HostprepError):
    """An OS-level operation failed while executing a step."""


class CommandError(ExecutionError):
    """A command could not be started, timed out, or exited non-zero."""

    def __init__(
        self,
        message: str,
        *,
        argv: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ):
        self.argv = argv or []
        self.returncode = returncode
        self.stderr = stderr
        if stderr:
            message = f"{message}\nStderr: {stderr}"
        super().__init__(message)


class DownloadError(ExecutionError):
    """A network transfer failed."""


class TemplateRenderError(ExecutionError):
    """A step field could not be rendered against its template context."""


class StepExecutionError(ExecutionError):
    """A step in a sequence failed; the remaining steps were not run.

    The underlying error is chained as ``__cause__``.
    """

    def __init__(self, index: int, action: str, message: str):
        self.index = index
        self.action = action
        super().__init__(f"step {index + 1} ({action}) failed: {message}")
