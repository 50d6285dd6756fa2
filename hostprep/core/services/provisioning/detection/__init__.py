"""
L3 Detection — read-only checks of the host.

Nothing in this package installs, writes, or spawns anything beyond
version checks.
"""

from hostprep.core.services.provisioning.detection.distro import (  # noqa: F401
    get_distro_family,
    get_distro_id,
    get_distro_id_like,
    get_distro_version,
    is_distro_in_family,
    read_os_release,
)
from hostprep.core.services.provisioning.detection.paths import (  # noqa: F401
    common_paths,
    enhanced_path,
    find_tool,
)
from hostprep.core.services.provisioning.detection.providers import (  # noqa: F401
    get_available_providers,
    is_system_supported,
    required_files_exist,
)
from hostprep.core.services.provisioning.detection.system_info import (  # noqa: F401
    current_arch,
    current_os,
    detect_system,
)
