"""FastAPI dependencies: wired components and the request owner."""

from typing import Optional

from fastapi import Depends, Header, Request

from ledger.models.principal import OwnerContext
from ledger.orchestrator import AppComponents


def get_components(request: Request) -> AppComponents:
    return request.app.state.components


async def get_owner(
    authorization: Optional[str] = Header(default=None),
    components: AppComponents = Depends(get_components),
) -> OwnerContext:
    """Run the authorization gate. Routes that touch the ledger depend on this."""
    return await components.gate.authorize(authorization)
