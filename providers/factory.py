"""Factory for creating metadata providers."""

from typing import Optional, Dict, Type

from config import settings
from contracts import FatalConfigError

from .base import MetadataProvider
from .gce_provider import GCEMetadataProvider


# Registry of available providers
PROVIDERS: Dict[str, Type[MetadataProvider]] = {
    "gce": GCEMetadataProvider,
    "google": GCEMetadataProvider,
}


def get_provider(provider_name: Optional[str] = None) -> MetadataProvider:
    """Get a metadata provider instance.

    Args:
        provider_name: Provider name (gce, google). Defaults to settings.metadata_provider.

    Returns:
        MetadataProvider instance

    Raises:
        FatalConfigError: The name is not a registered provider
    """
    name = provider_name or settings.metadata_provider
    provider_key = name.lower()
    if provider_key not in PROVIDERS:
        raise FatalConfigError(
            f"Unknown metadata provider: {name}. "
            f"Available: {list(PROVIDERS.keys())}"
        )
    return PROVIDERS[provider_key]()
