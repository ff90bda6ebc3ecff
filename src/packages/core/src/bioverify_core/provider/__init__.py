"""Source-of-truth provider API."""
from bioverify_core.provider.client import (
    ProviderClient,
    clear_client_cache,
    get_provider_client,
)
from bioverify_core.provider.models import ProviderJobStatus

__all__ = ["ProviderClient", "ProviderJobStatus", "clear_client_cache", "get_provider_client"]
