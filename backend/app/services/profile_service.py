"""Profile service: user self-service and watch-list statistics."""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import AccountDeactivatedError, ConflictError, NotFoundError, ValidationError
from app.models.user import User
from app.models.watch_list_entry import WatchListEntry
from app.schemas.user import UserStats
from app.services.auth_service import hash_password, normalize_email, verify_password

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "email", "bio", "avatar")


async def _get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def _days_since(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return max(0, (datetime.now(timezone.utc) - moment).days)


async def get_user_stats(db: AsyncSession, user_id: int) -> UserStats:
    user = await _get_user(db, user_id)

    total_animes = (await db.execute(
        select(func.count(WatchListEntry.id)).where(WatchListEntry.user_id == user_id)
    )).scalar() or 0

    favorite_count = (await db.execute(
        select(func.count(WatchListEntry.id))
        .where(WatchListEntry.user_id == user_id, WatchListEntry.is_favorite == True)
    )).scalar() or 0

    return UserStats(
        total_animes=total_animes,
        favorite_count=favorite_count,
        joined_days=_days_since(user.created_at),
    )


async def update_profile(db: AsyncSession, user_id: int, data: dict[str, Any]) -> User:
    """Apply the provided profile fields. A new email must not belong to anyone else."""
    user = await _get_user(db, user_id)
    changes = {key: value for key, value in data.items() if key in PROFILE_FIELDS}

    if changes.get("email"):
        email = normalize_email(changes["email"])
        if email != user.email:
            taken = (await db.execute(
                select(User.id).where(User.email == email, User.id != user_id)
            )).scalar_one_or_none()
            if taken:
                raise ConflictError("Email already in use")
        user.email = email
    if changes.get("name"):
        user.name = changes["name"].strip()
    if "bio" in changes:
        user.bio = changes["bio"]
    if "avatar" in changes:
        user.avatar = str(changes["avatar"]) if changes["avatar"] is not None else None

    try:
        async with db.begin_nested():
            await db.flush()
    except IntegrityError:
        raise ConflictError("Email already in use") from None

    await db.refresh(user)
    logger.info("Updated profile for user %s", user_id)
    return user


async def change_password(db: AsyncSession, user_id: int, old_password: str, new_password: str) -> None:
    """Re-hash and store the new password once the current one checks out.

    Password policy (length, complexity, must differ) is enforced by the
    request schemas before this is called.
    """
    user = await _get_user(db, user_id)

    if not verify_password(old_password, user.hashed_password):
        raise ValidationError(
            "Current password is incorrect",
            [{"field": "oldPassword", "message": "Current password is incorrect"}],
        )

    user.hashed_password = hash_password(new_password)
    await db.flush()
    logger.info("Password changed for user %s", user_id)


async def deactivate_account(db: AsyncSession, user_id: int) -> None:
    """Soft delete: the row and its watch list stay, the account can no longer log in."""
    user = await _get_user(db, user_id)
    user.is_active = False
    await db.flush()
    logger.info("Deactivated account %s", user_id)


async def update_last_login(db: AsyncSession, user_id: int) -> None:
    user = await _get_user(db, user_id)
    user.last_login_at = datetime.now(timezone.utc)
    await db.flush()


async def get_full_profile(db: AsyncSession, user_id: int) -> tuple[User, UserStats]:
    user = await _get_user(db, user_id)
    if not user.is_active:
        raise AccountDeactivatedError("Account is deactivated")

    stats = await get_user_stats(db, user_id)
    return user, stats
