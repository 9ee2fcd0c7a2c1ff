"""Pydantic schemas package."""

from app.schemas.common import CamelModel, Pagination
from app.schemas.anime import (
    AnimeRead,
    WatchListEntryRead,
    ListEntryWrite,
    RatingUpdate,
    EpisodesUpdate,
)
from app.schemas.user import (
    UserRead,
    UserStats,
    RegisterRequest,
    LoginRequest,
    ProfileUpdate,
    PasswordChange,
)

__all__ = [
    "CamelModel",
    "Pagination",
    # Anime / watch list
    "AnimeRead",
    "WatchListEntryRead",
    "ListEntryWrite",
    "RatingUpdate",
    "EpisodesUpdate",
    # User
    "UserRead",
    "UserStats",
    "RegisterRequest",
    "LoginRequest",
    "ProfileUpdate",
    "PasswordChange",
]
