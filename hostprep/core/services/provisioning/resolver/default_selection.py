"""
L2 Resolver — Default package manager selection.

Pure function over the detected managers: no I/O, no PATH lookups.
The caller supplies the os-release data it already read.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TypeVar

from hostprep.core.models.system import SystemInfo
from hostprep.core.services.provisioning.data.constants import (
    ARCH_BASE_PROVIDER,
    AUR_HELPERS,
    DARWIN_PREFERENCE,
    DISTRO_DEFAULT_PROVIDERS,
    DISTRO_FAMILIES,
    WINDOWS_PREFERENCE,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_arch_family(system: SystemInfo, id_like: list[str]) -> bool:
    distro = system.os_family
    if distro == "arch" or distro in DISTRO_FAMILIES["arch"]:
        return True
    return "arch" in id_like


def _platform_preference(system: SystemInfo, id_like: list[str]) -> tuple[str, ...]:
    if system.os == "linux":
        if _is_arch_family(system, id_like):
            return AUR_HELPERS + (ARCH_BASE_PROVIDER,)
        return ()
    if system.os == "darwin":
        return DARWIN_PREFERENCE
    if system.os == "windows":
        return WINDOWS_PREFERENCE
    return ()


def select_default(
    managers: Mapping[str, T],
    system: SystemInfo,
    os_release: Mapping[str, str] | None = None,
) -> T | None:
    """Pick the default package manager among ``managers``.

    Resolution order:
      1. os-release ``ID`` then each ``ID_LIKE`` token, mapped through
         ``DISTRO_DEFAULT_PROVIDERS``
      2. Platform preference (AUR helpers before pacman on the arch
         family, brew before macports, winget before chocolatey and scoop)
      3. Lexicographically smallest available name

    Args:
        managers: Available managers keyed by provider name.
        system: Host identity.
        os_release: Parsed os-release (Linux only; may be empty).

    Returns:
        A value from ``managers``, or ``None`` when it is empty.
    """
    if not managers:
        return None

    os_release = os_release or {}
    id_like = os_release.get("ID_LIKE", "").split()

    # 1. Distribution mapping
    if system.os == "linux":
        distro_ids = [os_release.get("ID", "") or system.os_family, *id_like]
        for distro in distro_ids:
            name = DISTRO_DEFAULT_PROVIDERS.get(distro.lower())
            if name and name in managers:
                logger.debug("Default %s selected from distro %s", name, distro)
                return managers[name]

    # 2. Platform preference
    for name in _platform_preference(system, id_like):
        if name in managers:
            logger.debug("Default %s selected by platform preference", name)
            return managers[name]

    # 3. Deterministic fallback
    name = min(managers)
    logger.debug("Default %s selected as first available", name)
    return managers[name]
