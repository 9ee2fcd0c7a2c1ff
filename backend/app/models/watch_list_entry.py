"""Watch-list entry model: one row per (user, anime) pair."""

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin, IntegerIDMixin


class WatchStatus(str, enum.Enum):
    WATCHING = "watching"
    COMPLETED = "completed"
    PLAN_TO_WATCH = "plan-to-watch"
    DROPPED = "dropped"
    ON_HOLD = "on-hold"


WATCH_STATUSES = [status.value for status in WatchStatus]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WatchListEntry(IntegerIDMixin, TimestampMixin, Base):
    __tablename__ = "watch_list_entries"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    anime_id = Column(Integer, ForeignKey("animes.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), default=WatchStatus.PLAN_TO_WATCH.value, nullable=False)
    is_favorite = Column(Boolean, default=False, nullable=False)
    rating = Column(Integer)  # 1-5
    watched_episodes = Column(Integer, default=0, nullable=False)
    notes = Column(Text)
    added_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="watch_list")
    anime = relationship("Anime", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("user_id", "anime_id", name="uq_watch_list_user_anime"),
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_watch_list_rating_range"),
        CheckConstraint("watched_episodes >= 0", name="ck_watch_list_episodes_non_negative"),
        CheckConstraint(
            "status IN ('watching', 'completed', 'plan-to-watch', 'dropped', 'on-hold')",
            name="ck_watch_list_status",
        ),
        Index("idx_watch_list_user_favorite", "user_id", "is_favorite"),
    )
