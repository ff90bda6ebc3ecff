"""Tenants and their provider configuration."""
from bioverify_core.tenants.models import Tenant, TenantProviderConfig
from bioverify_core.tenants.repo import (
    get_provider_config,
    get_tenant,
    parse_provider_config,
    upsert_tenant,
)

__all__ = [
    "Tenant",
    "TenantProviderConfig",
    "get_provider_config",
    "get_tenant",
    "parse_provider_config",
    "upsert_tenant",
]
