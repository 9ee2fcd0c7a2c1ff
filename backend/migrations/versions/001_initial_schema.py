"""Initial schema: users, animes, watch_list_entries.

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1. users
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("avatar", sa.String(500)),
        sa.Column("bio", sa.Text),
        sa.Column("is_active", sa.Boolean, server_default=sa.text("true"), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # 2. animes
    op.create_table(
        "animes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("synopsis", sa.Text, nullable=False, server_default=""),
        sa.Column("genre", sa.String(255), nullable=False, server_default=""),
        sa.Column("year", sa.String(10), nullable=False, server_default="N/A"),
        sa.Column("rating", sa.String(20), nullable=False, server_default="N/A"),
        sa.Column("score", sa.Float),
        sa.Column("duration", sa.String(50), nullable=False, server_default="N/A"),
        sa.Column("image_url", sa.String(500), nullable=False, server_default=""),
        sa.Column("background_image", sa.String(500)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("length(title) > 0", name="ck_animes_title_not_empty"),
    )
    op.create_index("ix_animes_title", "animes", ["title"])

    # 3. watch_list_entries
    op.create_table(
        "watch_list_entries",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("anime_id", sa.Integer, sa.ForeignKey("animes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(20), server_default="plan-to-watch", nullable=False),
        sa.Column("is_favorite", sa.Boolean, server_default=sa.text("false"), nullable=False),
        sa.Column("rating", sa.Integer),
        sa.Column("watched_episodes", sa.Integer, server_default=sa.text("0"), nullable=False),
        sa.Column("notes", sa.Text),
        sa.Column("added_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "anime_id", name="uq_watch_list_user_anime"),
        sa.CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_watch_list_rating_range"),
        sa.CheckConstraint("watched_episodes >= 0", name="ck_watch_list_episodes_non_negative"),
        sa.CheckConstraint(
            "status IN ('watching', 'completed', 'plan-to-watch', 'dropped', 'on-hold')",
            name="ck_watch_list_status",
        ),
    )
    op.create_index("ix_watch_list_entries_user_id", "watch_list_entries", ["user_id"])
    op.create_index("ix_watch_list_entries_anime_id", "watch_list_entries", ["anime_id"])
    op.create_index("idx_watch_list_user_favorite", "watch_list_entries", ["user_id", "is_favorite"])


def downgrade() -> None:
    op.drop_table("watch_list_entries")
    op.drop_table("animes")
    op.drop_table("users")
