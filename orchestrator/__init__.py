"""Orchestrator module for sequencing a bootstrap run."""

from .parameter_builder import (
    build_autopilot,
    build_parameter_set,
    validate_role,
)
from .supervisor_control import SupervisorControl
from .bootstrap_manager import (
    BootstrapManager,
    BootstrapResult,
    BootstrapStage,
    run_bootstrap,
)

__all__ = [
    "build_autopilot",
    "build_parameter_set",
    "validate_role",
    "SupervisorControl",
    "BootstrapManager",
    "BootstrapResult",
    "BootstrapStage",
    "run_bootstrap",
]
