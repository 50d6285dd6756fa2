"""
Repository intents and the template context their steps render against.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Repository(BaseModel):
    """A request to add or remove a software repository.

    Attributes:
        name:            Repository name, used for file names and keys.
        package_manager: Provider that owns the repository.
        action:          ``add`` or ``remove``.
    """

    name: str
    package_manager: str
    action: Literal["add", "remove"] = "add"
    url: str = ""
    key_url: str = ""
    arch: str = ""
    channel: str = ""
    component: str = ""


class TemplateContext(BaseModel):
    """Substitution variables shared by every step of one operation.

    Field names are the names templates reference, e.g.
    ``deb {{URL}} {{Channel}} {{Component}}``.
    """

    model_config = ConfigDict(frozen=True)

    Name: str = ""
    URL: str = ""
    KeyURL: str = ""
    Arch: str = ""
    Channel: str = ""
    Component: str = ""
    SourcesPath: str = ""
    KeyPath: str = ""
    TempKeyPath: str = ""
    Home: str = ""
    User: str = ""
    Bin: str = ""


class StepResult(BaseModel):
    """Record of one completed step."""

    index: int
    action: str
    detail: str = ""


class OperationOutcome(BaseModel):
    """Result of one independent operation in a batch.

    Batches (repositories, packages, clean) keep going after a failure;
    each item reports here instead of raising.
    """

    name: str
    ok: bool = True
    error: str = ""
    steps: list[StepResult] = Field(default_factory=list)
