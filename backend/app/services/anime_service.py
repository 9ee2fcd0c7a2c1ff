"""Catalogue and watch-list service: anime queries and per-user list entries."""

import logging
import math
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.anime import Anime
from app.models.watch_list_entry import WatchListEntry, WatchStatus, WATCH_STATUSES
from app.schemas.common import Pagination

logger = logging.getLogger(__name__)

ANIME_NOT_FOUND = "Anime not found"
NOT_IN_LIST = "Anime not in your list"
ALREADY_IN_LIST = "Anime already in your list"

ENTRY_FIELDS = ("status", "is_favorite", "rating", "watched_episodes", "notes")
NOTES_MAX_LENGTH = 500

_ANIME_SORT_COLUMNS = {
    "title": Anime.title,
    "year": Anime.year,
    "rating": Anime.rating,
}

_LIST_SORT_COLUMNS = {
    "title": Anime.title,
    "added_at": WatchListEntry.added_at,
    "addedAt": WatchListEntry.added_at,
    "rating": WatchListEntry.rating,
}


def _escape_like(value: str) -> str:
    """Escape %, _ and the escape character itself for LIKE patterns."""
    return value.replace("\\", "\\\\").replace("%", r"\%").replace("_", r"\_")


def _is_descending(sort_order: str) -> bool:
    order = (sort_order or "ASC").upper()
    if order not in ("ASC", "DESC"):
        raise ValidationError("sortOrder must be ASC or DESC", [{"field": "sortOrder", "message": "Invalid sort order"}])
    return order == "DESC"


def _check_page(page: int, limit: int) -> None:
    errors = []
    if page < 1:
        errors.append({"field": "page", "message": "Page must be at least 1"})
    if limit < 1:
        errors.append({"field": "limit", "message": "Limit must be at least 1"})
    if errors:
        raise ValidationError("Invalid pagination parameters", errors)


def validate_entry_fields(data: dict[str, Any]) -> None:
    """Range checks shared by the add and update paths."""
    errors = []

    status = data.get("status")
    if status is not None and _status_value(status) not in WATCH_STATUSES:
        errors.append({"field": "status", "message": f"Status must be one of: {', '.join(WATCH_STATUSES)}"})

    rating = data.get("rating")
    if rating is not None and (isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5):
        errors.append({"field": "rating", "message": "Rating must be an integer between 1 and 5"})

    episodes = data.get("watched_episodes")
    if episodes is not None and (isinstance(episodes, bool) or not isinstance(episodes, int) or episodes < 0):
        errors.append({"field": "watchedEpisodes", "message": "Watched episodes must be a non-negative integer"})

    notes = data.get("notes")
    if notes is not None and len(notes) > NOTES_MAX_LENGTH:
        errors.append({"field": "notes", "message": "Notes cannot exceed 500 characters"})

    if errors:
        raise ValidationError(errors[0]["message"], errors)


def _status_value(status: WatchStatus | str) -> str:
    return status.value if isinstance(status, WatchStatus) else str(status)


# --- Catalogue ---

async def list_animes(
    db: AsyncSession,
    page: int = 1,
    limit: int = 20,
    genre: str | None = None,
    year: int | str | None = None,
    min_rating: float | None = None,
    sort_by: str = "title",
    sort_order: str = "ASC",
) -> tuple[list[Anime], Pagination]:
    """Return one page of the catalogue plus pagination metadata.

    Filters are ANDed together; any filter left as None is not applied.
    """
    _check_page(page, limit)
    if sort_by not in _ANIME_SORT_COLUMNS:
        raise ValidationError("sortBy must be one of: title, year, rating", [{"field": "sortBy", "message": "Invalid sort field"}])
    descending = _is_descending(sort_order)

    filters = []
    if genre:
        filters.append(Anime.genre.ilike(f"%{_escape_like(genre)}%", escape="\\"))
    if year is not None:
        filters.append(Anime.year == str(year))
    if min_rating is not None:
        filters.append(Anime.score >= min_rating)

    count_query = select(func.count(Anime.id)).where(*filters)
    total = (await db.execute(count_query)).scalar() or 0

    column = _ANIME_SORT_COLUMNS[sort_by]
    query = (
        select(Anime)
        .where(*filters)
        .order_by(column.desc() if descending else column.asc(), Anime.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await db.execute(query)
    animes = list(result.scalars().all())

    pagination = Pagination(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit))
    return animes, pagination


async def get_anime(db: AsyncSession, anime_id: int) -> Anime:
    anime = await db.get(Anime, anime_id)
    if not anime:
        raise NotFoundError(ANIME_NOT_FOUND)
    return anime


# --- Watch list ---

async def get_entry(db: AsyncSession, user_id: int, anime_id: int) -> WatchListEntry | None:
    """Return the user's entry for this anime, or None when it is not in their list."""
    result = await db.execute(
        select(WatchListEntry).where(
            WatchListEntry.user_id == user_id,
            WatchListEntry.anime_id == anime_id,
        )
    )
    return result.scalar_one_or_none()


async def _require_entry(db: AsyncSession, user_id: int, anime_id: int) -> WatchListEntry:
    entry = await get_entry(db, user_id, anime_id)
    if not entry:
        raise NotFoundError(NOT_IN_LIST)
    return entry


async def add_to_list(
    db: AsyncSession,
    user_id: int,
    anime_id: int,
    data: dict[str, Any] | None = None,
) -> WatchListEntry:
    """Create the (user, anime) entry with defaults for anything not provided.

    A second add for the same pair trips the unique constraint and becomes a
    ConflictError; there is no read-before-write.
    """
    data = {key: value for key, value in (data or {}).items() if key in ENTRY_FIELDS}
    validate_entry_fields(data)
    await get_anime(db, anime_id)

    entry = WatchListEntry(
        user_id=user_id,
        anime_id=anime_id,
        status=_status_value(data.get("status") or WatchStatus.PLAN_TO_WATCH),
        is_favorite=bool(data.get("is_favorite") or False),
        rating=data.get("rating"),
        watched_episodes=data.get("watched_episodes") or 0,
        notes=data.get("notes"),
    )

    try:
        async with db.begin_nested():
            db.add(entry)
    except IntegrityError:
        raise ConflictError(ALREADY_IN_LIST) from None

    await db.refresh(entry)
    logger.info("User %s added anime %s to their list", user_id, anime_id)
    return entry


async def remove_from_list(db: AsyncSession, user_id: int, anime_id: int) -> dict[str, str]:
    entry = await _require_entry(db, user_id, anime_id)
    await db.delete(entry)
    await db.flush()
    logger.info("User %s removed anime %s from their list", user_id, anime_id)
    return {"message": "Anime removed from your list"}


async def get_user_list(
    db: AsyncSession,
    user_id: int,
    status: WatchStatus | str | None = None,
    favorite: bool | None = None,
    sort_by: str = "added_at",
    sort_order: str = "DESC",
    page: int | None = None,
    limit: int = 12,
) -> list[WatchListEntry] | tuple[list[WatchListEntry], Pagination]:
    """Return the user's entries, filtered and sorted.

    Without ``page`` the whole list comes back; with it, a page and its
    pagination metadata (``total_pages`` is never below 1 here).
    """
    if sort_by not in _LIST_SORT_COLUMNS:
        raise ValidationError("sortBy must be one of: title, addedAt, rating", [{"field": "sortBy", "message": "Invalid sort field"}])
    descending = _is_descending(sort_order)

    filters = [WatchListEntry.user_id == user_id]
    if status is not None:
        status = _status_value(status)
        if status not in WATCH_STATUSES:
            raise ValidationError(f"Status must be one of: {', '.join(WATCH_STATUSES)}", [{"field": "status", "message": "Invalid status"}])
        filters.append(WatchListEntry.status == status)
    if favorite is not None:
        filters.append(WatchListEntry.is_favorite == favorite)

    column = _LIST_SORT_COLUMNS[sort_by]
    tiebreak = WatchListEntry.id.desc() if descending else WatchListEntry.id.asc()
    query = (
        select(WatchListEntry)
        .join(Anime, WatchListEntry.anime_id == Anime.id)
        .where(*filters)
        .order_by(column.desc() if descending else column.asc(), tiebreak)
    )

    if page is None:
        result = await db.execute(query)
        return list(result.scalars().all())

    _check_page(page, limit)
    total = (await db.execute(
        select(func.count(WatchListEntry.id)).where(*filters)
    )).scalar() or 0

    result = await db.execute(query.offset((page - 1) * limit).limit(limit))
    entries = list(result.scalars().all())

    pagination = Pagination(
        total=total,
        page=page,
        limit=limit,
        total_pages=max(1, math.ceil(total / limit)),
    )
    return entries, pagination


async def update_entry(
    db: AsyncSession,
    user_id: int,
    anime_id: int,
    data: dict[str, Any],
) -> WatchListEntry:
    """Apply only the fields present in ``data``; omitted fields keep their value."""
    entry = await _require_entry(db, user_id, anime_id)
    changes = {key: value for key, value in data.items() if key in ENTRY_FIELDS}
    validate_entry_fields(changes)

    for field, value in changes.items():
        if field == "status":
            if value is None:
                continue  # status column is NOT NULL
            value = _status_value(value)
        elif field == "is_favorite":
            if value is None:
                continue
            value = bool(value)
        elif field == "watched_episodes" and value is None:
            continue
        setattr(entry, field, value)

    await db.flush()
    await db.refresh(entry)
    return entry


async def toggle_favorite(db: AsyncSession, user_id: int, anime_id: int) -> WatchListEntry:
    entry = await _require_entry(db, user_id, anime_id)
    entry.is_favorite = not entry.is_favorite
    await db.flush()
    await db.refresh(entry)
    return entry


async def update_rating(db: AsyncSession, user_id: int, anime_id: int, rating: int) -> WatchListEntry:
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValidationError(
            "Rating must be between 1 and 5",
            [{"field": "rating", "message": "Rating must be between 1 and 5"}],
        )
    return await update_entry(db, user_id, anime_id, {"rating": rating})


async def update_watched_episodes(
    db: AsyncSession,
    user_id: int,
    anime_id: int,
    watched_episodes: int,
) -> WatchListEntry:
    if isinstance(watched_episodes, bool) or not isinstance(watched_episodes, int) or watched_episodes < 0:
        raise ValidationError(
            "Watched episodes cannot be negative",
            [{"field": "watchedEpisodes", "message": "Watched episodes cannot be negative"}],
        )
    return await update_entry(db, user_id, anime_id, {"watched_episodes": watched_episodes})
