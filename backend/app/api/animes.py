"""Anime catalogue and watch-list API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.responses import dump, dump_many, success
from app.dependencies.auth import get_optional_token_identity, require_token_identity
from app.models.base import get_db
from app.models.watch_list_entry import WatchStatus
from app.schemas.anime import (
    AnimeRead,
    AnimeSortField,
    EpisodesUpdate,
    ListEntryWrite,
    ListSortField,
    RatingUpdate,
    SortOrder,
    WatchListEntryRead,
)
from app.services import anime_service
from app.services.auth_service import CurrentIdentity

router = APIRouter(prefix="/animes", tags=["animes"])


@router.get("")
async def list_animes(
    db: AsyncSession = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    genre: str | None = Query(None, description="Substring match on genre"),
    year: int | None = Query(None, description="Exact release year"),
    min_rating: float | None = Query(None, alias="minRating", ge=0),
    sort_by: AnimeSortField = Query("title", alias="sortBy"),
    sort_order: SortOrder = Query("ASC", alias="sortOrder"),
):
    """List the catalogue with filters, sorting and pagination."""
    animes, pagination = await anime_service.list_animes(
        db,
        page=page,
        limit=limit,
        genre=genre,
        year=year,
        min_rating=min_rating,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return success({
        "animes": dump_many(AnimeRead, animes),
        "pagination": pagination.model_dump(by_alias=True),
    })


@router.get("/mylist/all")
async def get_my_list(
    identity: CurrentIdentity = Depends(require_token_identity),
    db: AsyncSession = Depends(get_db),
    status: WatchStatus | None = Query(None),
    favorite: bool | None = Query(None),
    sort_by: ListSortField = Query("addedAt", alias="sortBy"),
    sort_order: SortOrder = Query("DESC", alias="sortOrder"),
    page: int | None = Query(None, ge=1),
    limit: int = Query(12, ge=1, le=100),
):
    """The caller's watch list; paginated only when ``page`` is given."""
    result = await anime_service.get_user_list(
        db,
        identity.id,
        status=status,
        favorite=favorite,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    if page is None:
        return success(dump_many(WatchListEntryRead, result))

    entries, pagination = result
    return success({
        "entries": dump_many(WatchListEntryRead, entries),
        "pagination": pagination.model_dump(by_alias=True),
    })


@router.get("/{anime_id}")
async def get_anime(
    anime_id: int,
    identity: CurrentIdentity | None = Depends(get_optional_token_identity),
    db: AsyncSession = Depends(get_db),
):
    """Single anime, plus the caller's list entry when a valid token is sent."""
    anime = await anime_service.get_anime(db, anime_id)
    user_entry = None
    if identity:
        entry = await anime_service.get_entry(db, identity.id, anime_id)
        if entry:
            user_entry = dump(WatchListEntryRead, entry)
    return success({"anime": dump(AnimeRead, anime), "userEntry": user_entry})


@router.post("/{anime_id}/list", status_code=201)
async def add_to_my_list(
    anime_id: int,
    payload: ListEntryWrite | None = None,
    identity: CurrentIdentity = Depends(require_token_identity),
    db: AsyncSession = Depends(get_db),
):
    data = payload.model_dump(exclude_unset=True) if payload else {}
    entry = await anime_service.add_to_list(db, identity.id, anime_id, data)
    return success(dump(WatchListEntryRead, entry))


@router.delete("/{anime_id}/list")
async def remove_from_my_list(
    anime_id: int,
    identity: CurrentIdentity = Depends(require_token_identity),
    db: AsyncSession = Depends(get_db),
):
    result = await anime_service.remove_from_list(db, identity.id, anime_id)
    return success(message=result["message"])


@router.put("/{anime_id}/list")
async def update_anime_entry(
    anime_id: int,
    payload: ListEntryWrite,
    identity: CurrentIdentity = Depends(require_token_identity),
    db: AsyncSession = Depends(get_db),
):
    """Partial update: only fields present in the body change."""
    entry = await anime_service.update_entry(
        db, identity.id, anime_id, payload.model_dump(exclude_unset=True)
    )
    return success(dump(WatchListEntryRead, entry))


@router.patch("/{anime_id}/favorite")
async def toggle_favorite(
    anime_id: int,
    identity: CurrentIdentity = Depends(require_token_identity),
    db: AsyncSession = Depends(get_db),
):
    entry = await anime_service.toggle_favorite(db, identity.id, anime_id)
    return success(dump(WatchListEntryRead, entry))


@router.patch("/{anime_id}/rating")
async def update_rating(
    anime_id: int,
    payload: RatingUpdate,
    identity: CurrentIdentity = Depends(require_token_identity),
    db: AsyncSession = Depends(get_db),
):
    entry = await anime_service.update_rating(db, identity.id, anime_id, payload.rating)
    return success(dump(WatchListEntryRead, entry))


@router.patch("/{anime_id}/episodes")
async def update_watched_episodes(
    anime_id: int,
    payload: EpisodesUpdate,
    identity: CurrentIdentity = Depends(require_token_identity),
    db: AsyncSession = Depends(get_db),
):
    entry = await anime_service.update_watched_episodes(
        db, identity.id, anime_id, payload.watched_episodes
    )
    return success(dump(WatchListEntryRead, entry))
