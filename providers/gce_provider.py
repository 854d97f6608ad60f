"""Google Compute Engine metadata provider implementation."""

import logging
import re
from typing import Dict, Optional

import requests

from config import settings
from contracts import MetadataResolutionError

from .base import MetadataProvider

logger = logging.getLogger(__name__)

# .../zones/<region>-<az-letter>
_ZONE_PATTERN = re.compile(r"(?:^|/)zones/(?P<region>[a-z0-9-]+)-(?P<az>[a-z])$")


def parse_region(zone: str) -> str:
    """Strip the availability-zone suffix from a zone path.

    Args:
        zone: Zone identifier, e.g. ``projects/123/zones/us-west1-a``

    Returns:
        The region alone, e.g. ``us-west1``
    """
    match = _ZONE_PATTERN.search(zone.strip())
    if not match:
        raise MetadataResolutionError(f"Unrecognized zone identifier: {zone!r}")
    return match.group("region")


class GCEMetadataProvider(MetadataProvider):
    """Reads instance facts from the GCE metadata server."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the GCE provider.

        Args:
            base_url: Metadata root. Uses settings.metadata_url if not provided.
            headers: Identification headers. Uses settings.get_metadata_headers() if not provided.
            timeout: Per-request timeout. Uses settings.metadata_timeout_seconds if not provided.
        """
        self.base_url = (base_url or settings.metadata_url).rstrip("/")
        self.headers = headers or settings.get_metadata_headers()
        self.timeout = timeout if timeout is not None else settings.metadata_timeout_seconds

    @property
    def name(self) -> str:
        return "gce"

    def _get(self, path: str) -> str:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("GET %s", url)
        try:
            r = requests.get(url, headers=self.headers, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as exc:
            raise MetadataResolutionError(f"Metadata lookup failed for {path}: {exc}") from exc
        value = r.text.strip()
        if not value:
            raise MetadataResolutionError(f"Metadata lookup returned nothing for {path}")
        return value

    def get_instance_ip(self, interface: int = 0) -> str:
        return self._get(f"instance/network-interfaces/{interface}/ip")

    def get_instance_name(self) -> str:
        return self._get("instance/name")

    def get_project_id(self) -> str:
        return self._get("project/project-id")

    def get_zone(self) -> str:
        return self._get("instance/zone")

    def get_region(self) -> str:
        return parse_region(self.get_zone())

    def get_custom_value(self, key: str) -> str:
        return self._get(f"instance/attributes/{key}")
