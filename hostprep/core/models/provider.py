"""
Provider model — one package manager's declarative definition.

Loaded from a YAML definition file (built-in or user-supplied), a
provider says how to detect the package manager, which commands it
offers, and which step sequences install it, remove it, and add or
remove software repositories through it.

Step sequences are a closed union over nine actions.  Each variant
carries only the fields its action needs, and every string field is a
template rendered against a ``TemplateContext`` right before use.
"""

from __future__ import annotations

import shlex
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Action steps ────────────────────────────────────────────────


class _Step(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class DownloadStep(_Step):
    """Fetch ``source`` and atomically place it at ``dest``."""

    action: Literal["download"]
    source: str
    dest: str


class CommandStep(_Step):
    """Run ``exec`` with ``args`` through the command runner.

    ``elevated`` overrides the sequence default when set.
    """

    action: Literal["command"]
    exec: str
    args: list[str] = Field(default_factory=list)
    elevated: bool | None = None

    @field_validator("exec")
    @classmethod
    def _check_exec(cls, value: str) -> str:
        try:
            parts = shlex.split(value)
        except ValueError as e:
            raise ValueError(f"exec {value!r} cannot be split into arguments: {e}") from e
        if not parts:
            raise ValueError("exec must name a program")
        return value


class WriteStep(_Step):
    """Atomically write ``content`` to ``dest``."""

    action: Literal["write"]
    dest: str
    content: str


class RemoveStep(_Step):
    action: Literal["remove"]
    dest: str


class MkdirStep(_Step):
    action: Literal["mkdir"]
    dest: str
    mode: str = ""


class ChmodStep(_Step):
    action: Literal["chmod"]
    dest: str
    mode: str


class ChownStep(_Step):
    action: Literal["chown"]
    dest: str
    owner: str
    group: str = ""


class SymlinkStep(_Step):
    """Point the link ``dest`` at ``source``."""

    action: Literal["symlink"]
    source: str
    dest: str


class CopyStep(_Step):
    action: Literal["copy"]
    source: str
    dest: str


ActionStep = Annotated[
    Union[
        DownloadStep,
        CommandStep,
        WriteStep,
        RemoveStep,
        MkdirStep,
        ChmodStep,
        ChownStep,
        SymlinkStep,
        CopyStep,
    ],
    Field(discriminator="action"),
]


class StepSequence(BaseModel):
    """An ordered list of steps for one logical operation."""

    model_config = ConfigDict(frozen=True)

    steps: tuple[ActionStep, ...] = ()


# ── Provider sections ───────────────────────────────────────────


class DetectionConfig(BaseModel):
    """How to tell whether the provider is usable on this host."""

    binary: str = ""
    files: list[str] = Field(default_factory=list)
    distributions: list[str] = Field(default_factory=list)


class CommandConfig(BaseModel):
    """Subcommands appended to the resolved binary."""

    install: str = ""
    update: str = ""
    remove: str = ""
    list: str = ""
    search: str = ""
    clean: str = ""


class RepositoryPaths(BaseModel):
    sources: str = ""
    keys: str = ""
    config: str = ""


class RepositoryConfig(BaseModel):
    paths: RepositoryPaths = Field(default_factory=RepositoryPaths)
    add: StepSequence = Field(default_factory=StepSequence)
    remove: StepSequence = Field(default_factory=StepSequence)


class ProviderAlternatives(BaseModel):
    """Distribution-specific package name overrides."""

    model_config = ConfigDict(populate_by_name=True)

    core_packages: dict[str, list[str]] = Field(
        default_factory=dict, alias="corePackages",
    )


# ── Provider ────────────────────────────────────────────────────


class Provider(BaseModel):
    """A package manager definition.

    ``name`` is the registry key.  ``bin_path`` is never read from a
    definition: detection fills it in once the binary resolves.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    elevated: bool = False
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    commands: CommandConfig = Field(default_factory=CommandConfig)
    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    core_packages: dict[str, list[str]] = Field(
        default_factory=dict, alias="corePackages",
    )
    install: StepSequence = Field(default_factory=StepSequence)
    remove: StepSequence = Field(default_factory=StepSequence)
    environment: dict[str, str] = Field(default_factory=dict)
    alternatives: dict[str, ProviderAlternatives] = Field(default_factory=dict)

    bin_path: str = Field(default="", exclude=True)

    def has_alternatives_for(self, distro: str) -> bool:
        return distro in self.alternatives

    def core_packages_for(self, distro: str) -> dict[str, list[str]]:
        """Core package groups for ``distro``.

        Alternatives for the distribution replace the default list of
        each category they name; other categories keep the defaults.
        """
        merged = dict(self.core_packages)
        if self.has_alternatives_for(distro):
            merged.update(self.alternatives[distro].core_packages)
        return merged
