"""User model for authentication and profile data."""

from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin, IntegerIDMixin


class User(IntegerIDMixin, TimestampMixin, Base):
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)  # stored lower-cased
    hashed_password = Column(String(255), nullable=False)
    avatar = Column(String(500))
    bio = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime(timezone=True))

    # Relationships
    watch_list = relationship(
        "WatchListEntry",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
