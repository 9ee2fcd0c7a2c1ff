"""ORM models. Importing this package registers every table on Base.metadata."""

from app.models.base import Base
from app.models.user import User
from app.models.anime import Anime
from app.models.watch_list_entry import WatchListEntry, WatchStatus, WATCH_STATUSES

__all__ = ["Base", "User", "Anime", "WatchListEntry", "WatchStatus", "WATCH_STATUSES"]
