"""Anime model: catalogue entries, seeded locally or imported from Jikan."""

from sqlalchemy import CheckConstraint, Column, Float, String, Text

from app.models.base import Base, TimestampMixin, IntegerIDMixin


class Anime(IntegerIDMixin, TimestampMixin, Base):
    __tablename__ = "animes"

    title = Column(String(200), nullable=False, index=True)
    synopsis = Column(Text, nullable=False, default="")
    genre = Column(String(255), nullable=False, default="")  # comma-joined when multiple
    year = Column(String(10), nullable=False, default="N/A")  # may hold "N/A"
    rating = Column(String(20), nullable=False, default="N/A")  # age rating or score text
    score = Column(Float)  # numeric score, only known for imported titles
    duration = Column(String(50), nullable=False, default="N/A")
    image_url = Column(String(500), nullable=False, default="")
    background_image = Column(String(500))

    __table_args__ = (
        CheckConstraint("length(title) > 0", name="ck_animes_title_not_empty"),
    )
