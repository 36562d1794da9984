"""
Top‑level API router.

Aggregates the domain routers under the ``/api`` prefix applied in
``main.py``.  Guilds are the only domain today.
"""

from fastapi import APIRouter

from .endpoints import guilds

router = APIRouter()

router.include_router(guilds.router, prefix="/guilds", tags=["guilds"])
