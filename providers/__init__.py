"""Instance metadata providers for resolving node and cluster facts."""

from .base import MetadataProvider
from .gce_provider import GCEMetadataProvider, parse_region
from .factory import get_provider

__all__ = [
    "MetadataProvider",
    "GCEMetadataProvider",
    "parse_region",
    "get_provider",
]
