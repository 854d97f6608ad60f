"""Base metadata provider interface."""

import logging
from abc import ABC, abstractmethod

from contracts import ClusterFormationFacts, MetadataResolutionError, NodeRole

logger = logging.getLogger(__name__)


class MetadataProvider(ABC):
    """Abstract base class for instance metadata services.

    Each lookup is a single blocking round-trip with no retry. Failures surface as
    ``MetadataResolutionError``; an empty answer is never passed on as a value.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (gce)."""
        pass

    @abstractmethod
    def get_instance_ip(self, interface: int = 0) -> str:
        """IP address of the given network interface."""
        pass

    @abstractmethod
    def get_instance_name(self) -> str:
        pass

    @abstractmethod
    def get_project_id(self) -> str:
        pass

    @abstractmethod
    def get_zone(self) -> str:
        """Full zone identifier as reported by the service."""
        pass

    @abstractmethod
    def get_region(self) -> str:
        """Region of the instance, without the availability-zone suffix."""
        pass

    @abstractmethod
    def get_custom_value(self, key: str) -> str:
        """Value of a user-defined instance metadata key."""
        pass

    def get_expected_cluster_size(self, key: str) -> int:
        """Read the expected server count from custom metadata.

        Args:
            key: Custom metadata key holding the count

        Returns:
            Positive integer cluster size
        """
        raw = self.get_custom_value(key)
        try:
            size = int(raw)
        except ValueError:
            raise MetadataResolutionError(
                f"Metadata key '{key}' is not an integer: {raw!r}"
            ) from None
        if size < 1:
            raise MetadataResolutionError(
                f"Metadata key '{key}' must be a positive cluster size, got {size}"
            )
        return size

    def resolve_facts(
        self,
        role: NodeRole,
        cluster_size_key: str,
        interface: int = 0,
    ) -> ClusterFormationFacts:
        """Resolve everything a node needs to know about itself and its cluster.

        The cluster size is only looked up for servers; clients never read it.

        Args:
            role: Role of this node
            cluster_size_key: Custom metadata key carrying the cluster size
            interface: Network interface index for the advertised IP

        Returns:
            ClusterFormationFacts for this instance
        """
        expected_cluster_size = None
        if role == NodeRole.SERVER:
            expected_cluster_size = self.get_expected_cluster_size(cluster_size_key)

        facts = ClusterFormationFacts(
            self_ip=self.get_instance_ip(interface),
            self_name=self.get_instance_name(),
            region=self.get_region(),
            project_id=self.get_project_id(),
            expected_cluster_size=expected_cluster_size,
        )
        logger.info(
            "Resolved node %s (%s) in %s/%s",
            facts.self_name, facts.self_ip, facts.project_id, facts.region,
        )
        return facts
