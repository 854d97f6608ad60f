"""Pydantic contracts for the Consul node bootstrapper.

Every handoff between the resolver, the builders and the generators is typed
through these contracts.
"""

from .node_contracts import (
    NodeRole,
    ClusterFormationFacts,
)

from .parameter_contracts import (
    AutopilotSettings,
    ParameterOverrides,
    ParameterSet,
)

from .consul_contracts import ConsulNodeConfig

from .supervisor_contracts import SupervisedProcessDescriptor

from .errors import (
    BootstrapError,
    ValidationError,
    DependencyMissingError,
    MetadataResolutionError,
    FatalConfigError,
    ArtifactWriteError,
    SupervisorControlError,
)

__all__ = [
    # Node
    "NodeRole",
    "ClusterFormationFacts",
    # Parameters
    "AutopilotSettings",
    "ParameterOverrides",
    "ParameterSet",
    # Documents
    "ConsulNodeConfig",
    "SupervisedProcessDescriptor",
    # Errors
    "BootstrapError",
    "ValidationError",
    "DependencyMissingError",
    "MetadataResolutionError",
    "FatalConfigError",
    "ArtifactWriteError",
    "SupervisorControlError",
]
