"""HTMX partial endpoints for the list, details and search pages."""

import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies.auth import require_session_identity
from app.exceptions import AppError
from app.models.base import get_db
from app.models.watch_list_entry import WatchStatus
from app.services import anime_service
from app.services.auth_service import CurrentIdentity
from app.services.import_service import import_and_favorite
from app.services.jikan_client import MIN_SEARCH_LENGTH, JikanClient, get_jikan_client
from app.templating import htmx_error, swap_target, templates

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/search/results", response_class=HTMLResponse)
async def search_results(
    request: Request,
    q: str = "",
    client: JikanClient = Depends(get_jikan_client),
):
    """Search results fragment; short queries render an empty list without calling Jikan."""
    animes = []
    query = q.strip()
    if len(query) >= MIN_SEARCH_LENGTH:
        try:
            result = await client.search(query)
            animes = result.get("data") or []
        except httpx.HTTPError:
            logger.error("Search failed for %r", query)
    return templates.TemplateResponse(
        request, "partials/search_results.html", {"animes": animes, "query": query}
    )


@router.post("/animes/{anime_id}/add/htmx", response_class=HTMLResponse)
async def add_to_list_htmx(
    request: Request,
    anime_id: int,
    identity: CurrentIdentity = Depends(require_session_identity),
    db: AsyncSession = Depends(get_db),
):
    form = await request.form()
    status = str(form.get("status") or WatchStatus.PLAN_TO_WATCH.value)

    try:
        entry = await anime_service.add_to_list(db, identity.id, anime_id, {"status": status})
    except AppError as e:
        return htmx_error(request, e.message)

    return templates.TemplateResponse(
        request, "partials/htmx/add_to_list_success.html", {"anime": entry.anime, "entry": entry}
    )


@router.patch("/animes/{anime_id}/favorite/htmx", response_class=HTMLResponse)
async def toggle_favorite_htmx(
    request: Request,
    anime_id: int,
    identity: CurrentIdentity = Depends(require_session_identity),
    db: AsyncSession = Depends(get_db),
):
    """Toggle the favorite flag, adding the anime as a favorite if it is not listed yet."""
    try:
        entry = await anime_service.get_entry(db, identity.id, anime_id)
        if entry:
            entry = await anime_service.toggle_favorite(db, identity.id, anime_id)
        else:
            entry = await anime_service.add_to_list(
                db, identity.id, anime_id,
                {"status": WatchStatus.PLAN_TO_WATCH, "is_favorite": True},
            )
    except AppError as e:
        return htmx_error(request, e.message)

    return templates.TemplateResponse(
        request,
        "partials/htmx/favorite_button.html",
        {
            "anime": entry.anime,
            "is_favorite": entry.is_favorite,
            "target_id": swap_target(request, f"favorite-{anime_id}"),
        },
    )


@router.delete("/animes/{anime_id}/list/htmx", response_class=HTMLResponse)
async def remove_from_list_htmx(
    request: Request,
    anime_id: int,
    identity: CurrentIdentity = Depends(require_session_identity),
    db: AsyncSession = Depends(get_db),
):
    try:
        await anime_service.remove_from_list(db, identity.id, anime_id)
    except AppError as e:
        return htmx_error(request, e.message)

    # Empty body removes the card from the page
    return HTMLResponse("")


@router.post("/external/{external_id}/favorite/htmx", response_class=HTMLResponse)
async def import_favorite_htmx(
    request: Request,
    external_id: int,
    identity: CurrentIdentity = Depends(require_session_identity),
    client: JikanClient = Depends(get_jikan_client),
    db: AsyncSession = Depends(get_db),
):
    """Import a search result into the catalogue and favorite it."""
    try:
        entry = await import_and_favorite(db, client, external_id, identity.id)
    except AppError as e:
        return htmx_error(request, e.message)
    except httpx.HTTPError:
        return htmx_error(request, "Could not reach the anime database, try again later")

    return templates.TemplateResponse(
        request,
        "partials/htmx/favorite_button.html",
        {
            "anime": entry.anime,
            "is_favorite": entry.is_favorite,
            "target_id": swap_target(request, f"external-favorite-{external_id}"),
        },
    )
