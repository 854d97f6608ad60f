"""Configuration settings for the Consul node bootstrapper."""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Dict, List, Optional
from pathlib import Path


class Settings(BaseSettings):
    """Compiled-in defaults for a bootstrap run.

    Settings can be overridden via environment variables with CONSUL_BOOTSTRAP_ prefix.
    Example: CONSUL_BOOTSTRAP_CONSUL_INSTALL_DIR=/usr/local/consul

    The instance is frozen: it is built once at startup and passed around as the
    defaults half of the (defaults, overrides) merge.
    """

    # Metadata service
    metadata_provider: str = Field(
        default="gce",
        description="Metadata provider used to resolve node facts"
    )
    metadata_url: str = Field(
        default="http://metadata.google.internal/computeMetadata/v1",
        description="Base URL of the instance metadata service"
    )
    metadata_header_name: str = Field(
        default="Metadata-Flavor",
        description="Identification header required on every metadata request"
    )
    metadata_header_value: str = Field(
        default="Google",
        description="Value of the identification header"
    )
    metadata_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Per-request timeout; None blocks until the service answers"
    )
    network_interface: int = Field(
        default=0,
        ge=0,
        description="Network interface index whose IP is advertised"
    )
    cluster_size_metadata_key: str = Field(
        default="cluster-size",
        description="Custom metadata key carrying the expected number of servers"
    )

    # Paths
    consul_install_dir: str = Field(
        default="/opt/consul",
        description="Root of the Consul install (config, data, log and bin live below it)"
    )
    consul_config_filename: str = Field(
        default="default.json",
        description="Name of the generated agent configuration file"
    )
    supervisor_config_path: str = Field(
        default="/etc/supervisor/conf.d/run-consul.conf",
        description="Where the supervisord program descriptor is written"
    )
    supervisor_program_name: str = Field(
        default="consul",
        description="Program name in the supervisord descriptor"
    )
    supervisorctl_bin: str = Field(
        default="supervisorctl",
        description="supervisorctl executable used to reload supervisord"
    )
    required_executables: List[str] = Field(
        default_factory=lambda: ["supervisorctl"],
        description="Executables that must be on PATH before anything is written"
    )

    # Agent document
    client_addr: str = Field(
        default="0.0.0.0",
        description="Address the agent binds its client interfaces to"
    )
    retry_join_provider: str = Field(
        default="gce",
        description="Cloud auto-join provider named in the retry_join directive"
    )
    raft_protocol: int = Field(
        default=3,
        description="Raft protocol version"
    )

    # Autopilot
    autopilot_cleanup_dead_servers: bool = Field(default=True)
    autopilot_last_contact_threshold: str = Field(default="200ms")
    autopilot_max_trailing_logs: int = Field(default=250, ge=0)
    autopilot_server_stabilization_time: str = Field(default="10s")
    autopilot_redundancy_zone_tag: str = Field(
        default="az",
        description="Node meta key for redundancy zones; empty disables the feature"
    )
    autopilot_disable_upgrade_migration: bool = Field(default=False)
    autopilot_upgrade_version_tag: Optional[str] = Field(default=None)

    model_config = {
        "env_prefix": "CONSUL_BOOTSTRAP_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
    }

    def get_install_path(self) -> Path:
        """Get install root as Path object."""
        return Path(self.consul_install_dir)

    def get_default_config_dir(self) -> Path:
        return self.get_install_path() / "config"

    def get_default_data_dir(self) -> Path:
        return self.get_install_path() / "data"

    def get_default_log_dir(self) -> Path:
        return self.get_install_path() / "log"

    def get_default_bin_dir(self) -> Path:
        return self.get_install_path() / "bin"

    def get_metadata_headers(self) -> Dict[str, str]:
        """Headers sent with every metadata request."""
        return {self.metadata_header_name: self.metadata_header_value}


# Create singleton instance
settings = Settings()
