"""Node identity contracts: the role a node plays and the facts it resolves at boot."""

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class NodeRole(str, Enum):
    """Role of the Consul agent on this instance."""
    SERVER = "server"
    CLIENT = "client"


class ClusterFormationFacts(BaseModel):
    """Facts resolved from the metadata service.

    Never user-supplied. ``expected_cluster_size`` is only resolved for servers.
    """

    model_config = {"frozen": True}

    self_ip: str = Field(..., description="IP address advertised to peers")
    self_name: str = Field(..., description="Instance name, used as the node name")
    region: str = Field(..., description="Region with the zone suffix stripped")
    project_id: str = Field(..., description="Project owning the instance")
    expected_cluster_size: Optional[int] = Field(
        default=None,
        ge=1,
        description="Number of servers to wait for before bootstrapping",
    )
