"""Tenant repository using SQLite."""
from pydantic import ValidationError as PydanticValidationError

from bioverify_core.db import get_conn
from bioverify_core.tenants.models import Tenant, TenantProviderConfig
from bioverify_core.util import ConfigurationError, utc_now_iso


def upsert_tenant(tenant_id: str, name: str, identity_source_config: str | None = None) -> Tenant:
    """Insert or update a tenant."""
    now = utc_now_iso()
    with get_conn() as conn:
        conn.execute(
            """
            INSERT INTO tenants (tenant_id, name, identity_source_config, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(tenant_id) DO UPDATE SET
                name = excluded.name,
                identity_source_config = excluded.identity_source_config,
                updated_at = excluded.updated_at
            """,
            (tenant_id, name, identity_source_config, now, now),
        )
    return get_tenant(tenant_id)


def get_tenant(tenant_id: str) -> Tenant | None:
    """Get a tenant by ID."""
    with get_conn() as conn:
        row = conn.execute(
            "SELECT tenant_id, name, identity_source_config FROM tenants WHERE tenant_id = ?",
            (tenant_id,),
        ).fetchone()
        if row is None:
            return None
        return Tenant(**dict(row))


def parse_provider_config(raw: str | None, tenant_id: str = "") -> TenantProviderConfig:
    """Parse a stored provider configuration document."""
    if raw is None or not raw.strip():
        raise ConfigurationError(f"SoT provider configuration is missing for tenant {tenant_id}")
    try:
        return TenantProviderConfig.model_validate_json(raw)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"SoT provider configuration for tenant {tenant_id} is invalid: {e}"
        ) from e


def get_provider_config(tenant_id: str) -> TenantProviderConfig:
    """Resolve a tenant's provider configuration."""
    tenant = get_tenant(tenant_id)
    if tenant is None:
        raise ConfigurationError(f"Tenant not found for ID: {tenant_id}")
    return parse_provider_config(tenant.identity_source_config, tenant_id)
