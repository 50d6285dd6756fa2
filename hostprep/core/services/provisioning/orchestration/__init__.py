"""
L5 Orchestration — re-exports the top-level coordinators.
"""

from hostprep.core.services.provisioning.orchestration.orchestrator import (  # noqa: F401
    build_repository_context,
    clean_package_managers,
    detect_os,
    install_core_packages,
    install_provider,
    process_packages,
    process_repositories,
    process_repository,
    remove_provider,
    run_manager,
)
