"""Pydantic schemas for Anime and WatchListEntry."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from app.models.watch_list_entry import WatchStatus
from app.schemas.common import CamelModel


class AnimeRead(CamelModel):
    """Full catalogue entry output."""

    id: int
    title: str
    synopsis: str
    genre: str
    year: str
    rating: str
    score: float | None = None
    duration: str
    image_url: str
    background_image: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class WatchListEntryRead(CamelModel):
    """Watch-list entry joined with its anime."""

    id: int
    user_id: int
    anime_id: int
    status: WatchStatus
    is_favorite: bool
    rating: int | None = None
    watched_episodes: int
    notes: str | None = None
    added_at: datetime
    created_at: datetime | None = None
    updated_at: datetime | None = None
    anime: AnimeRead | None = None


class ListEntryWrite(CamelModel):
    """Body for adding or updating a watch-list entry. Every field is optional."""

    status: WatchStatus | None = None
    is_favorite: bool | None = None
    rating: int | None = Field(None, ge=1, le=5)
    watched_episodes: int | None = Field(None, ge=0)
    notes: str | None = Field(None, max_length=500)


class RatingUpdate(CamelModel):
    rating: int = Field(..., ge=1, le=5)


class EpisodesUpdate(CamelModel):
    watched_episodes: int = Field(..., ge=0)


AnimeSortField = Literal["title", "year", "rating"]
ListSortField = Literal["title", "addedAt", "added_at", "rating"]
SortOrder = Literal["ASC", "DESC", "asc", "desc"]
