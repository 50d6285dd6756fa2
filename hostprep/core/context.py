"""
Provision context — what one hostprep run works with.

Bundles the run settings and the provider registry they configure.
Built ONCE by whichever entry point starts the run:

    - CLI:    main.py  → ProvisionContext.from_settings(load_settings())
    - Tests:  conftest → ProvisionContext(settings=..., registry=...)

Services take the context as their first argument instead of reading
module-level state, so independent runs never share a registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from hostprep.core.models.settings import Settings
from hostprep.core.services.provisioning.registry import ProviderRegistry


@dataclass
class ProvisionContext:
    settings: Settings = field(default_factory=Settings)
    registry: ProviderRegistry = field(default_factory=ProviderRegistry)

    @classmethod
    def from_settings(cls, settings: Settings) -> ProvisionContext:
        """Context whose registry honours ``settings.providers_path``."""
        return cls(
            settings=settings,
            registry=ProviderRegistry(providers_path=settings.providers_path),
        )
