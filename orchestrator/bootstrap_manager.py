"""Bootstrap Manager - central orchestrator for a node bootstrap run.

The Bootstrap Manager sequences one run:
1. Validates role flags, overrides and required executables (no side effects)
2. Resolves cluster-formation facts and writes the Consul config, unless skipped
3. Writes the supervisord program descriptor
4. Signals supervisord to reread and apply its configuration

Failures propagate as BootstrapError subclasses. Nothing is rolled back: a failure
after the Consul config is written leaves that file in place, but supervisord is
never signalled for a partial run.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional
import logging

from config import Settings, settings
from contracts import (
    ClusterFormationFacts,
    ConsulNodeConfig,
    ParameterOverrides,
    ParameterSet,
    SupervisedProcessDescriptor,
)
from generators import (
    generate_consul_config,
    generate_descriptor,
    write_consul_config,
    write_descriptor,
)
from orchestrator.parameter_builder import build_parameter_set
from orchestrator.supervisor_control import SupervisorControl
from providers import MetadataProvider, get_provider

logger = logging.getLogger(__name__)


class BootstrapStage(str, Enum):
    """Stages of a bootstrap run, in execution order."""
    VALIDATE = "validate"
    RESOLVE_METADATA = "resolve_metadata"
    GENERATE_CONFIG = "generate_config"
    SKIP_CONFIG = "skip_config"
    GENERATE_SUPERVISOR_DESCRIPTOR = "generate_supervisor_descriptor"
    SIGNAL_SUPERVISOR = "signal_supervisor"
    DONE = "done"


@dataclass
class BootstrapResult:
    """Outcome of a completed bootstrap run."""
    params: ParameterSet
    descriptor: SupervisedProcessDescriptor
    supervisor_config_path: Path
    facts: Optional[ClusterFormationFacts] = None
    consul_config: Optional[ConsulNodeConfig] = None
    consul_config_path: Optional[Path] = None
    stages: List[BootstrapStage] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        end = self.completed_at or datetime.now()
        return round((end - self.started_at).total_seconds(), 2)


class BootstrapManager:
    """State machine for one bootstrap run.

    Collaborators are injectable so tests can substitute the metadata service,
    supervisord and the user database.
    """

    def __init__(
        self,
        defaults: Optional[Settings] = None,
        provider: Optional[MetadataProvider] = None,
        supervisor: Optional[SupervisorControl] = None,
        owner_lookup: Optional[Callable[[str], str]] = None,
        home_lookup: Optional[Callable[[str], str]] = None,
    ):
        """Initialize the Bootstrap Manager.

        Args:
            defaults: Compiled defaults (module settings if not provided)
            provider: Metadata provider (built from defaults.metadata_provider if not provided)
            supervisor: supervisorctl wrapper
            owner_lookup: Path owner lookup used for the default run-as user
            home_lookup: Home directory lookup for the run-as user
        """
        self.defaults = defaults or settings
        self._provider = provider
        self.supervisor = supervisor or SupervisorControl(
            supervisorctl_bin=self.defaults.supervisorctl_bin,
            required_executables=list(self.defaults.required_executables),
        )
        self.owner_lookup = owner_lookup
        self.home_lookup = home_lookup

    @property
    def provider(self) -> MetadataProvider:
        if self._provider is None:
            self._provider = get_provider(self.defaults.metadata_provider)
        return self._provider

    def validate(self, overrides: ParameterOverrides) -> ParameterSet:
        """Build the parameter set and check dependencies before touching anything."""
        kwargs = {}
        if self.owner_lookup is not None:
            kwargs["owner_lookup"] = self.owner_lookup
        params = build_parameter_set(overrides, self.defaults, **kwargs)
        self.supervisor.check_available()
        return params

    def run(self, overrides: ParameterOverrides) -> BootstrapResult:
        """Execute a complete bootstrap run.

        Args:
            overrides: Raw caller input

        Returns:
            BootstrapResult describing what was written
        """
        started_at = datetime.now()
        stages: List[BootstrapStage] = []

        # Step 1: Validate
        params = self.validate(overrides)
        stages.append(BootstrapStage.VALIDATE)
        logger.info("Bootstrapping Consul %s", params.role.value)

        # Step 2: Resolve facts and write the agent config
        facts = None
        consul_config = None
        consul_config_path = None
        if params.skip_consul_config:
            logger.info("Skipping Consul config generation")
            stages.append(BootstrapStage.SKIP_CONFIG)
        else:
            facts = self.provider.resolve_facts(
                params.role,
                self.defaults.cluster_size_metadata_key,
                interface=self.defaults.network_interface,
            )
            stages.append(BootstrapStage.RESOLVE_METADATA)
            consul_config = generate_consul_config(
                facts, params, client_addr=self.defaults.client_addr
            )
            consul_config_path = write_consul_config(
                consul_config,
                params.config_dir,
                params.user,
                filename=self.defaults.consul_config_filename,
            )
            stages.append(BootstrapStage.GENERATE_CONFIG)

        # Step 3: Supervisor descriptor
        home_dir = self.home_lookup(params.user) if self.home_lookup is not None else None
        descriptor = generate_descriptor(
            params.config_dir,
            params.data_dir,
            params.log_dir,
            params.bin_dir,
            params.user,
            home_dir=home_dir,
            program_name=self.defaults.supervisor_program_name,
        )
        supervisor_config_path = write_descriptor(
            descriptor, self.defaults.supervisor_config_path
        )
        stages.append(BootstrapStage.GENERATE_SUPERVISOR_DESCRIPTOR)

        # Step 4: Signal supervisord, even when the config step was skipped
        self.supervisor.reload()
        stages.append(BootstrapStage.SIGNAL_SUPERVISOR)
        stages.append(BootstrapStage.DONE)

        return BootstrapResult(
            params=params,
            descriptor=descriptor,
            supervisor_config_path=supervisor_config_path,
            facts=facts,
            consul_config=consul_config,
            consul_config_path=consul_config_path,
            stages=stages,
            started_at=started_at,
            completed_at=datetime.now(),
        )


def run_bootstrap(
    overrides: ParameterOverrides,
    defaults: Optional[Settings] = None,
    provider: Optional[MetadataProvider] = None,
) -> BootstrapResult:
    """Convenience function to run a bootstrap.

    Args:
        overrides: Raw caller input
        defaults: Compiled defaults (module settings if not provided)
        provider: Metadata provider override

    Returns:
        BootstrapResult
    """
    manager = BootstrapManager(defaults=defaults, provider=provider)
    return manager.run(overrides)
