"""
L2 Resolver — pure decisions over detection results.
"""

from hostprep.core.services.provisioning.resolver.default_selection import (  # noqa: F401
    select_default,
)
