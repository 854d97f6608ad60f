"""Contract for the generated Consul agent configuration document."""

from pydantic import BaseModel, Field
from typing import List, Optional

from .parameter_contracts import AutopilotSettings


class ConsulNodeConfig(BaseModel):
    """The ``default.json`` document read by the Consul agent.

    Optional fields are omitted from the serialized document when unset. An omitted
    field and an explicit false/empty value mean different things to the agent, so
    serialization must go through ``to_document``.
    """

    model_config = {"frozen": True}

    advertise_addr: str
    bind_addr: str
    bootstrap_expect: Optional[int] = Field(default=None, description="Servers only")
    client_addr: str
    datacenter: str
    node_name: str
    retry_join: Optional[List[str]] = Field(
        default=None,
        description="Cloud auto-join directives; only set when a cluster tag is given",
    )
    server: bool
    encrypt: Optional[str] = Field(
        default=None,
        description="Gossip key; an explicitly empty key is kept as an empty string",
    )
    autopilot: AutopilotSettings
    raft_protocol: int = 3
    ui: bool = True

    def to_document(self) -> dict:
        """Return the document as a plain dict with unset fields dropped."""
        return self.model_dump(exclude_none=True)
