"""Parameter contracts: raw caller overrides and the effective parameter set."""

from pydantic import BaseModel, Field
from typing import Optional

from .node_contracts import NodeRole


class AutopilotSettings(BaseModel):
    """Autopilot tunables as they appear in the agent document."""

    model_config = {"frozen": True}

    cleanup_dead_servers: bool
    last_contact_threshold: str = Field(..., description="Duration string, e.g. 200ms")
    max_trailing_logs: int = Field(..., ge=0)
    server_stabilization_time: str = Field(..., description="Duration string, e.g. 10s")
    redundancy_zone_tag: str = Field(..., description="Empty string disables redundancy zones")
    disable_upgrade_migration: bool
    upgrade_version_tag: Optional[str] = None


class ParameterOverrides(BaseModel):
    """Raw caller input.

    ``None`` means the option was not provided at all, ``""`` means it was provided
    empty. The two are kept apart because some fields (the encryption key) treat an
    explicitly empty value as meaningful.
    """

    server: bool = False
    client: bool = False
    cluster_tag_name: Optional[str] = None
    raft_protocol: Optional[int] = None
    config_dir: Optional[str] = None
    data_dir: Optional[str] = None
    log_dir: Optional[str] = None
    bin_dir: Optional[str] = None
    user: Optional[str] = None
    skip_consul_config: bool = False
    encrypt_key: Optional[str] = None

    autopilot_cleanup_dead_servers: Optional[bool] = None
    autopilot_last_contact_threshold: Optional[str] = None
    autopilot_max_trailing_logs: Optional[int] = None
    autopilot_server_stabilization_time: Optional[str] = None
    autopilot_redundancy_zone_tag: Optional[str] = None
    autopilot_disable_upgrade_migration: Optional[bool] = None
    autopilot_upgrade_version_tag: Optional[str] = None


class ParameterSet(BaseModel):
    """Effective parameters for one bootstrap run, defaults already applied."""

    model_config = {"frozen": True}

    role: NodeRole
    cluster_tag_name: Optional[str] = None
    raft_protocol: int
    config_dir: str
    data_dir: str
    log_dir: str
    bin_dir: str
    user: str
    skip_consul_config: bool = False
    encrypt_key: Optional[str] = None
    autopilot: AutopilotSettings

    @property
    def is_server(self) -> bool:
        return self.role == NodeRole.SERVER
