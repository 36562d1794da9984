"""
Guild endpoints.

A thin CRUD surface over ``GuildService``.  Request bodies are validated
against ``GuildCreate``/``GuildUpdate`` before the service is called;
service errors propagate to the exception handlers registered in
``main.py``, which turn them into ``{"error": ..., "details": ...}``
responses with the matching status code.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from guild_manager_api.app.api.deps import get_guild_service
from guild_manager_api.app.schemas.guild import ErrorResponse, GuildCreate, GuildRead, GuildUpdate
from guild_manager_api.app.services.guild_service import GuildService

router = APIRouter()

_errors = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@router.get("", response_model=List[GuildRead], responses=_errors)
async def list_guilds(service: GuildService = Depends(get_guild_service)) -> List[GuildRead]:
    """Return every guild, ordered by name."""
    return await service.list_guilds()


@router.post(
    "",
    response_model=GuildRead,
    status_code=status.HTTP_201_CREATED,
    responses={**_errors, status.HTTP_409_CONFLICT: {"model": ErrorResponse}},
)
async def create_guild(
    guild_in: GuildCreate,
    service: GuildService = Depends(get_guild_service),
) -> GuildRead:
    """Create a guild.  ``level`` defaults to 1 when missing or unusable."""
    return await service.create_guild(guild_in)


@router.put(
    "/{guild_id}",
    response_model=GuildRead,
    responses={
        **_errors,
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
    },
)
async def update_guild(
    guild_id: int,
    guild_in: GuildUpdate,
    service: GuildService = Depends(get_guild_service),
) -> GuildRead:
    """Rename a guild; the level changes only when one is provided."""
    return await service.update_guild(guild_id, guild_in)


@router.delete(
    "/{guild_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_errors, status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def delete_guild(
    guild_id: int,
    service: GuildService = Depends(get_guild_service),
) -> Response:
    """Delete a guild."""
    await service.delete_guild(guild_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
