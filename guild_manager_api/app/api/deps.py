"""
API dependencies.

The ``GuildService`` is built once by the application lifespan and kept
on ``app.state``; routes receive it through ``Depends(get_guild_service)``.
Tests can replace it with ``app.dependency_overrides``.
"""

from fastapi import Request

from guild_manager_api.app.core.exceptions import StoreError
from guild_manager_api.app.services.guild_service import GuildService


def get_guild_service(request: Request) -> GuildService:
    """Return the service bound to the running application."""
    service = getattr(request.app.state, "guild_service", None)
    if service is None:
        raise StoreError("Guild store is not available")
    return service
