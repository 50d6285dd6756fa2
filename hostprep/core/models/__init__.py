"""
Domain models — Pydantic types for hostprep.

All models are re-exported here for convenient access:

    from hostprep.core.models import Provider, OSInfo, TemplateContext
"""

from hostprep.core.models.command import Command, CommandResult
from hostprep.core.models.provider import (
    ActionStep,
    ChmodStep,
    ChownStep,
    CommandConfig,
    CommandStep,
    CopyStep,
    DetectionConfig,
    DownloadStep,
    MkdirStep,
    Provider,
    ProviderAlternatives,
    RemoveStep,
    RepositoryConfig,
    RepositoryPaths,
    StepSequence,
    SymlinkStep,
    WriteStep,
)
from hostprep.core.models.settings import Settings
from hostprep.core.models.system import OSInfo, PackageManagerInfo, SystemInfo, ToolInfo
from hostprep.core.models.template import (
    OperationOutcome,
    Repository,
    StepResult,
    TemplateContext,
)

__all__ = [
    "ActionStep",
    "ChmodStep",
    "ChownStep",
    "Command",
    "CommandConfig",
    "CommandResult",
    "CommandStep",
    "CopyStep",
    "DetectionConfig",
    "DownloadStep",
    "MkdirStep",
    "OperationOutcome",
    "OSInfo",
    "PackageManagerInfo",
    "Provider",
    "ProviderAlternatives",
    "RemoveStep",
    "Repository",
    "RepositoryConfig",
    "RepositoryPaths",
    "Settings",
    "StepResult",
    "StepSequence",
    "SymlinkStep",
    "SystemInfo",
    "TemplateContext",
    "ToolInfo",
    "WriteStep",
]
