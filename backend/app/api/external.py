"""Jikan pass-through API endpoints and import-and-favorite."""

import logging
from typing import Any, Awaitable

import httpx
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.responses import dump, failure, success
from app.dependencies.auth import require_token_identity
from app.models.base import get_db
from app.schemas.anime import WatchListEntryRead
from app.services.auth_service import CurrentIdentity
from app.services.import_service import import_and_favorite
from app.services.jikan_client import JikanClient, get_jikan_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/external", tags=["external"])


async def _proxy(call: Awaitable[dict[str, Any]], failure_message: str):
    """Await a Jikan lookup, turning transport/HTTP errors into a 502 envelope."""
    try:
        return success(await call)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            return failure("Anime not found", 404)
        return failure(failure_message, 502)
    except httpx.HTTPError:
        return failure(failure_message, 502)


@router.get("/search")
async def search_anime(
    title: str | None = Query(None),
    client: JikanClient = Depends(get_jikan_client),
):
    if not title or not title.strip():
        return failure("Missing or invalid title parameter", 400)
    return await _proxy(client.search(title), "Failed to fetch from Jikan API")


@router.get("/anime/{anime_id}")
async def get_anime_by_id(anime_id: int, client: JikanClient = Depends(get_jikan_client)):
    return await _proxy(client.get_anime(anime_id), "Failed to fetch anime details from Jikan API")


@router.get("/top")
async def get_top_anime(client: JikanClient = Depends(get_jikan_client)):
    return await _proxy(client.top(), "Failed to fetch top anime from Jikan API")


@router.get("/recommendations")
async def get_recommendations(client: JikanClient = Depends(get_jikan_client)):
    return await _proxy(client.recommendations(), "Failed to fetch recommendations from Jikan API")


@router.get("/random")
async def get_random_anime(client: JikanClient = Depends(get_jikan_client)):
    return await _proxy(client.random(), "Failed to fetch random anime from Jikan API")


@router.post("/anime/{anime_id}/import", status_code=201)
async def import_anime(
    anime_id: int,
    identity: CurrentIdentity = Depends(require_token_identity),
    client: JikanClient = Depends(get_jikan_client),
    db: AsyncSession = Depends(get_db),
):
    """Copy a Jikan title into the catalogue and favorite it for the caller."""
    try:
        entry = await import_and_favorite(db, client, anime_id, identity.id)
    except httpx.HTTPError:
        return failure("Failed to import anime from Jikan API", 502)
    return success(dump(WatchListEntryRead, entry), message="Anime imported and added to favorites")
