"""Import Jikan titles into the local catalogue and favorite them."""

import logging
from typing import Any

import httpx
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError
from app.models.anime import Anime
from app.models.watch_list_entry import WatchListEntry
from app.services import anime_service
from app.services.jikan_client import JikanClient

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE = "/static/img/placeholder.svg"


def _dig(payload: dict, *keys: str) -> Any:
    """Follow nested keys, returning None as soon as one is missing."""
    value: Any = payload
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _first(*values: Any) -> Any:
    for value in values:
        if value not in (None, ""):
            return value
    return None


def _extract_year(data: dict) -> str:
    year = _first(
        data.get("year"),
        _dig(data, "aired", "prop", "from", "year"),
    )
    if year is not None:
        return str(year)
    aired_from = _dig(data, "aired", "from")
    if isinstance(aired_from, str) and len(aired_from) >= 4 and aired_from[:4].isdigit():
        return aired_from[:4]
    return "N/A"


def map_external_anime(payload: dict[str, Any]) -> dict[str, Any]:
    """Map a Jikan anime record (bare or wrapped in ``data``) onto Anime columns."""
    data = payload.get("data", payload) if isinstance(payload, dict) else {}
    if not isinstance(data, dict) or data.get("mal_id") is None:
        raise NotFoundError("Anime not found")

    genres = ", ".join(g["name"] for g in data.get("genres") or [] if g.get("name"))
    score = data.get("score")

    return {
        "id": int(data["mal_id"]),
        "title": _first(data.get("title"), data.get("title_english"), data.get("title_japanese")) or "Untitled",
        "synopsis": data.get("synopsis") or "",
        "genre": genres,
        "year": _extract_year(data),
        "rating": str(score) if score is not None else (data.get("rating") or "N/A"),
        "score": float(score) if score is not None else None,
        "duration": data.get("duration") or "N/A",
        "image_url": _first(
            _dig(data, "images", "webp", "large_image_url"),
            _dig(data, "images", "jpg", "large_image_url"),
            _dig(data, "images", "webp", "image_url"),
            _dig(data, "images", "jpg", "image_url"),
        ) or PLACEHOLDER_IMAGE,
        "background_image": _dig(data, "trailer", "images", "maximum_image_url"),
    }


def _upsert_statement(dialect_name: str, values: dict[str, Any]):
    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect_name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise NotImplementedError(f"Anime upsert is not supported on {dialect_name}")

    stmt = insert(Anime).values(**values)
    overwrite = {key: stmt.excluded[key] for key in values if key != "id"}
    overwrite["updated_at"] = func.now()
    return stmt.on_conflict_do_update(index_elements=[Anime.id], set_=overwrite)


async def upsert_anime(db: AsyncSession, values: dict[str, Any]) -> Anime:
    """Insert or overwrite the anime row keyed by id (last write wins)."""
    dialect_name = db.get_bind().dialect.name
    await db.execute(_upsert_statement(dialect_name, values))
    return await db.get(Anime, values["id"], populate_existing=True)


async def import_and_favorite(
    db: AsyncSession,
    client: JikanClient,
    external_id: int,
    user_id: int,
) -> WatchListEntry:
    """Fetch a Jikan title, upsert it locally and mark it as a favorite."""
    try:
        payload = await client.get_anime(external_id)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            raise NotFoundError("Anime not found") from None
        raise
    values = map_external_anime(payload)
    anime = await upsert_anime(db, values)
    logger.info("Imported Jikan anime %s (%s)", anime.id, anime.title)

    entry = await anime_service.get_entry(db, user_id, anime.id)
    if entry:
        return await anime_service.update_entry(db, user_id, anime.id, {"is_favorite": True})
    return await anime_service.add_to_list(db, user_id, anime.id, {"is_favorite": True})
