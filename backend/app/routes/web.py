"""Web routes for HTML pages."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies.auth import get_session_identity, require_session_identity
from app.dependencies.flash import flash
from app.exceptions import AppError
from app.models.base import get_db
from app.services import anime_service, profile_service
from app.services.auth_service import CurrentIdentity
from app.templating import page_context, templates

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, db: AsyncSession = Depends(get_db)):
    """Home carousel with the first page of the catalogue."""
    animes, _ = await anime_service.list_animes(db, limit=10)
    return templates.TemplateResponse(
        request, "pages/home.html", page_context(request, title="Home", animes=animes)
    )


@router.get("/search", response_class=HTMLResponse)
async def search_page(request: Request):
    return templates.TemplateResponse(
        request, "pages/search.html", page_context(request, title="Search animes")
    )


@router.get("/animes", response_class=HTMLResponse)
async def anime_list_page(
    request: Request,
    identity: CurrentIdentity = Depends(require_session_identity),
    db: AsyncSession = Depends(get_db),
):
    """The logged-in user's watch list."""
    entries = await anime_service.get_user_list(db, identity.id)
    return templates.TemplateResponse(
        request, "pages/anime_list.html", page_context(request, title="My list", entries=entries)
    )


@router.get("/animes/{anime_id}", response_class=HTMLResponse)
async def anime_details_page(request: Request, anime_id: int, db: AsyncSession = Depends(get_db)):
    try:
        anime = await anime_service.get_anime(db, anime_id)
    except AppError as e:
        flash(request, e.message, "error")
        return RedirectResponse("/", status_code=303)

    entry = None
    identity = get_session_identity(request)
    if identity:
        entry = await anime_service.get_entry(db, identity.id, anime_id)

    return templates.TemplateResponse(
        request,
        "pages/anime_details.html",
        page_context(request, title=anime.title, anime=anime, entry=entry),
    )


@router.get("/profile", response_class=HTMLResponse)
async def profile_page(
    request: Request,
    identity: CurrentIdentity = Depends(require_session_identity),
    db: AsyncSession = Depends(get_db),
):
    try:
        user, stats = await profile_service.get_full_profile(db, identity.id)
    except AppError as e:
        logger.warning("Could not load profile for user %s: %s", identity.id, e.message)
        flash(request, "Could not load your profile", "error")
        return RedirectResponse("/", status_code=303)

    return templates.TemplateResponse(
        request, "pages/profile.html", page_context(request, title="My profile", user=user, stats=stats)
    )
