"""
L4 Execution — everything that mutates the host.

All process spawning goes through ``subprocess_runner.run_command``.
"""

from hostprep.core.services.provisioning.execution.download import (  # noqa: F401
    fetch_to,
)
from hostprep.core.services.provisioning.execution.file_ops import (  # noqa: F401
    atomic_relocate,
    atomic_write,
    make_temp_near,
)
from hostprep.core.services.provisioning.execution.step_executors import (  # noqa: F401
    execute_steps,
)
from hostprep.core.services.provisioning.execution.subprocess_runner import (  # noqa: F401
    build_argv,
    build_env,
    command_exists,
    get_bin_path,
    run_command,
)
from hostprep.core.services.provisioning.execution.templates import (  # noqa: F401
    render,
)
