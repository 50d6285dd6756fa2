"""
Command and CommandResult — the command runner's I/O contract.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class Command(BaseModel):
    """One logical command invocation.

    ``elevated`` and ``as_user`` are mutually exclusive, as are
    ``interactive`` and ``capture``.
    """

    exec: str
    args: list[str] = Field(default_factory=list)
    elevated: bool = False
    as_user: str = ""
    interactive: bool = False
    capture: bool = False
    variables: dict[str, str] = Field(default_factory=dict)
    log_name: str = ""

    @model_validator(mode="after")
    def _check_modes(self) -> Command:
        if self.elevated and self.as_user:
            raise ValueError("'elevated' and 'as_user' are mutually exclusive")
        if self.interactive and self.capture:
            raise ValueError("'interactive' and 'capture' are mutually exclusive")
        return self


class CommandResult(BaseModel):
    """Outcome of a successful command."""

    argv: list[str]
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0
