"""
Run settings — flags consumed by the command runner and the engine.

Loaded from ``hostprep.yml`` by ``hostprep.core.config.loader``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Run-wide flags.

    Attributes:
        debug:            Stream command stdout to the terminal.
        interactive:      Attach commands to the controlling terminal.
        elevated:         Default elevation for provider install/remove
                          commands that do not set it themselves.
        log_file:         Append-mode log for command stdout when not
                          in debug mode.
        command_timeout:  Seconds before a command is killed (None = wait).
        download_timeout: Seconds before a network transfer is abandoned.
        providers_path:   Directory of provider definitions, searched
                          before the standard locations.
    """

    debug: bool = False
    interactive: bool = False
    elevated: bool = False
    log_file: str = ""
    command_timeout: float | None = Field(default=1800, gt=0)
    download_timeout: float = Field(default=60, gt=0)
    providers_path: str = ""
