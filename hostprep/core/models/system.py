"""
System identity and detected package managers.

``OSInfo`` is the per-run snapshot produced by a detection pass.  It is
rebuilt every time detection runs and is never persisted.
"""

from __future__ import annotations

import shlex

from pydantic import BaseModel, Field

from hostprep.core.models.provider import Provider

_OPERATIONS = ("install", "update", "remove", "list", "search", "clean")


class ToolInfo(BaseModel):
    """Result of a binary lookup on the enhanced PATH."""

    exists: bool = False
    bin: str = ""


class SystemInfo(BaseModel):
    """OS identity.

    Attributes:
        os:         ``linux`` | ``darwin`` | ``windows``.
        os_family:  Distribution id on Linux (``ubuntu``, ``arch``...),
                    otherwise the OS name.
        os_version: Release version string.
        arch:       Normalized architecture (``amd64``, ``arm64``...).
    """

    os: str
    os_family: str = ""
    os_version: str = ""
    arch: str = ""


class PackageManagerInfo(BaseModel):
    """A detected provider, ready to invoke.

    Command fields hold ``"<bin> <subcommand>"``.  Use :meth:`argv` to
    get an argument vector for the command runner.
    """

    name: str
    bin: str
    install: str = ""
    update: str = ""
    remove: str = ""
    list: str = ""
    search: str = ""
    clean: str = ""
    elevated: bool = False
    environment: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_provider(cls, provider: Provider, bin_path: str) -> PackageManagerInfo:
        commands = provider.commands
        return cls(
            name=provider.name,
            bin=bin_path,
            elevated=provider.elevated,
            environment=dict(provider.environment),
            **{
                op: f"{bin_path} {getattr(commands, op)}".rstrip()
                for op in _OPERATIONS
            },
        )

    def argv(self, operation: str, *extra: str) -> list[str]:
        """Argument vector for ``operation`` followed by ``extra`` args.

        Raises:
            ValueError: Unknown operation, or the provider defines no
                subcommand for it.
        """
        if operation not in _OPERATIONS:
            raise ValueError(f"Unknown package manager operation: {operation}")
        composed = getattr(self, operation)
        if not composed or composed == self.bin:
            raise ValueError(f"{self.name} has no '{operation}' command")
        sub = composed[len(self.bin):] if composed.startswith(self.bin) else composed
        return [self.bin, *shlex.split(sub), *extra]


class OSInfo(BaseModel):
    """Per-run detection snapshot."""

    system: SystemInfo
    managers: dict[str, PackageManagerInfo] = Field(default_factory=dict)
    default: PackageManagerInfo | None = None

    def get_manager(self, name: str | None) -> PackageManagerInfo | None:
        """Look up a detected manager; ``None`` name means the default."""
        if not name:
            return self.default
        return self.managers.get(name)
