"""
L3 Detection — which registered providers are usable on this host.

A provider is available when all three hold, checked in this order:

1. its ``distributions`` list names the OS or the distro (directly or
   through the distro family);
2. its binary resolves on the enhanced PATH;
3. every path in ``detection.files`` exists.

A provider that passes gets ``bin_path`` set to the resolved binary.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from hostprep.core.models.provider import Provider
from hostprep.core.services.provisioning.detection.distro import (
    get_distro_id,
    is_distro_in_family,
)
from hostprep.core.services.provisioning.detection.paths import find_tool
from hostprep.core.services.provisioning.detection.system_info import current_os

if TYPE_CHECKING:
    from hostprep.core.services.provisioning.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def is_system_supported(provider: Provider, os_name: str, distro: str = "") -> bool:
    """Whether ``provider`` declares support for this OS or distro.

    Distro matching only applies on Linux with a known distro id.
    """
    check_distro = os_name == "linux" and bool(distro)

    for token in provider.detection.distributions:
        if token == os_name:
            return True
        if check_distro and (token == distro or is_distro_in_family(distro, token)):
            return True
    return False


def required_files_exist(provider: Provider) -> bool:
    for path in provider.detection.files:
        if not os.path.exists(os.path.expanduser(path)):
            logger.debug("Required file %s not found for %s", path, provider.name)
            return False
    return True


def get_available_providers(
    registry: ProviderRegistry,
    *,
    os_name: str | None = None,
    distro: str | None = None,
) -> dict[str, Provider]:
    """Name → provider for every provider usable on this host.

    Args:
        registry: Source of definitions (initialized on demand).
        os_name: Override the detected OS (tests).
        distro: Override the detected distro id (tests).
    """
    registry.initialize()

    if os_name is None:
        os_name = current_os()
    if distro is None:
        distro = get_distro_id() if os_name == "linux" else ""

    available: dict[str, Provider] = {}
    for provider in registry.all():
        if not is_system_supported(provider, os_name, distro):
            logger.debug(
                "Provider %s does not support %s/%s", provider.name, os_name, distro or "-",
            )
            continue

        tool = find_tool(provider.detection.binary)
        if not tool.exists:
            logger.debug(
                "Binary %s not found for provider %s",
                provider.detection.binary, provider.name,
            )
            continue

        if not required_files_exist(provider):
            continue

        provider.bin_path = tool.bin
        available[provider.name] = provider
        logger.debug("Provider %s available at %s", provider.name, tool.bin)

    return available
