"""Tenant provider configuration."""
import hashlib

from pydantic import BaseModel, Field


class TenantProviderConfig(BaseModel):
    """How to reach and decrypt results from a tenant's source-of-truth provider.

    Stored on the tenant as a JSON document. Both snake_case and the camelCase
    keys written by older tooling are accepted.
    """

    provider_name: str = Field(..., min_length=1, alias="providerName")
    api_base_url: str = Field(..., min_length=1, alias="apiBaseUrl")
    client_id: str = Field(..., min_length=1, alias="clientId")
    client_secret: str | None = Field(default=None, alias="clientSecret")
    # Raw key/IV material, used as UTF-8 bytes (not base64).
    decryption_key: str = Field(..., min_length=1, alias="decryptionKey")
    decryption_iv: str = Field(..., min_length=1, alias="decryptionIv")

    class Config:
        populate_by_name = True
        extra = "ignore"

    def fingerprint(self) -> str:
        """Stable hash of the fields that determine an HTTP client."""
        material = "\x1f".join(
            [self.provider_name.upper(), self.api_base_url, self.client_id, self.client_secret or ""]
        )
        return hashlib.sha256(material.encode("utf-8")).hexdigest()


class Tenant(BaseModel):
    """A tenant row."""

    tenant_id: str
    name: str
    identity_source_config: str | None = None
