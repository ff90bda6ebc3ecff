"""Request-scoped dependencies."""
from fastapi import Header, HTTPException
from pydantic import BaseModel

from bioverify_core.verification.runner import Dispatcher


class Actor(BaseModel):
    """The acting identity, resolved by the gateway in front of this service."""

    tenant_id: str
    actor_id: str


def get_actor(
    x_tenant_id: str = Header(default=""),
    x_actor_id: str = Header(default=""),
) -> Actor:
    """Read the acting tenant and user from request headers."""
    if not x_tenant_id.strip() or not x_actor_id.strip():
        raise HTTPException(status_code=401, detail="X-Tenant-Id and X-Actor-Id headers are required")
    return Actor(tenant_id=x_tenant_id.strip(), actor_id=x_actor_id.strip())


def get_dispatcher() -> Dispatcher | None:
    """Job dispatcher; None means the default RQ/thread dispatch."""
    return None
