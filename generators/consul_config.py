"""Configuration Document Generator - builds the Consul agent's default.json.

The transform is pure: identical facts and parameters always render to identical
bytes. Writing overwrites whatever was there before; nothing is merged or diffed.
"""

import json
import logging
import shutil
from pathlib import Path
from typing import List, Optional, Union

from config import settings
from contracts import (
    ArtifactWriteError,
    ClusterFormationFacts,
    ConsulNodeConfig,
    ParameterSet,
)

logger = logging.getLogger(__name__)


def build_retry_join(
    project_id: str,
    cluster_tag_name: str,
    provider: Optional[str] = None,
) -> List[str]:
    """Cloud auto-join directive: find peers by instance tag instead of by address."""
    provider = provider or settings.retry_join_provider
    return [f"provider={provider} project_name={project_id} tag_value={cluster_tag_name}"]


def generate_consul_config(
    facts: ClusterFormationFacts,
    params: ParameterSet,
    client_addr: Optional[str] = None,
) -> ConsulNodeConfig:
    """Generate the agent document from resolved facts and effective parameters.

    Args:
        facts: Facts resolved from the metadata service
        params: Effective parameter set
        client_addr: Client bind address (settings.client_addr if not provided)

    Returns:
        ConsulNodeConfig with conditional fields set only when their trigger holds
    """
    bootstrap_expect = facts.expected_cluster_size if params.is_server else None

    retry_join = None
    if params.cluster_tag_name:
        retry_join = build_retry_join(facts.project_id, params.cluster_tag_name)

    return ConsulNodeConfig(
        advertise_addr=facts.self_ip,
        bind_addr=facts.self_ip,
        bootstrap_expect=bootstrap_expect,
        client_addr=client_addr or settings.client_addr,
        datacenter=facts.region,
        node_name=facts.self_name,
        retry_join=retry_join,
        server=params.is_server,
        encrypt=params.encrypt_key,
        autopilot=params.autopilot,
        raft_protocol=params.raft_protocol,
        ui=True,
    )


def render_consul_config(config: ConsulNodeConfig) -> str:
    """Serialize the document to JSON text."""
    return json.dumps(config.to_document(), indent=2) + "\n"


def write_consul_config(
    config: ConsulNodeConfig,
    config_dir: Union[str, Path],
    user: str,
    filename: Optional[str] = None,
) -> Path:
    """Write the document into the config dir and hand it to the run-as user.

    Args:
        config: Generated document
        config_dir: Agent configuration directory
        user: Owner of the written file
        filename: File name (settings.consul_config_filename if not provided)

    Returns:
        Path to the written file
    """
    path = Path(config_dir) / (filename or settings.consul_config_filename)
    logger.info("Writing Consul config to %s", path)
    try:
        path.write_text(render_consul_config(config))
        shutil.chown(path, user=user)
    except (OSError, LookupError) as exc:
        raise ArtifactWriteError(f"Could not write {path}: {exc}") from exc
    return path
