"""
L3 Detection — OS identity (name, family, version, architecture).
"""

from __future__ import annotations

import logging
import platform
import subprocess

from hostprep.core.models.system import SystemInfo
from hostprep.core.services.provisioning.data.constants import ARCH_MAP
from hostprep.core.services.provisioning.detection.distro import (
    get_distro_id,
    get_distro_version,
)

logger = logging.getLogger(__name__)


def current_os() -> str:
    """``linux`` | ``darwin`` | ``windows`` (or whatever the platform says)."""
    return platform.system().lower()


def current_arch() -> str:
    machine = platform.machine()
    return ARCH_MAP.get(machine, ARCH_MAP.get(machine.lower(), machine.lower()))


def _darwin_version() -> str:
    try:
        r = subprocess.run(
            ["sw_vers", "-productVersion"],
            capture_output=True, text=True, timeout=5,
        )
        return r.stdout.strip() or "unknown"
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning("Error getting macOS version: %s", e)
        return "unknown"


def detect_system() -> SystemInfo:
    """Snapshot of the host's identity."""
    os_name = current_os()

    if os_name == "linux":
        family = get_distro_id() or "unknown"
        version = get_distro_version() or "unknown"
    elif os_name == "darwin":
        family = "darwin"
        version = _darwin_version()
    elif os_name == "windows":
        family = "windows"
        version = platform.version() or "unknown"
    else:
        family = os_name
        version = platform.release() or "unknown"

    return SystemInfo(
        os=os_name,
        os_family=family,
        os_version=version.lower(),
        arch=current_arch(),
    )
