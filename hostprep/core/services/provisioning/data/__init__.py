"""
L0 Data — static tables and the built-in provider definitions.

Built-in definitions live in ``definitions/*.yaml`` next to this file
and ship as package data.
"""

from hostprep.core.services.provisioning.data.constants import (  # noqa: F401
    ARCH_BASE_PROVIDER,
    ARCH_MAP,
    AUR_HELPERS,
    DARWIN_PREFERENCE,
    DISTRO_DEFAULT_PROVIDERS,
    DISTRO_FAMILIES,
    WINDOWS_PREFERENCE,
)
