"""Profile self-service API endpoints. All routes require a bearer token."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.responses import dump, success
from app.dependencies.auth import require_token_identity
from app.models.base import get_db
from app.schemas.user import PasswordChange, ProfileUpdate, UserRead
from app.services import profile_service
from app.services.auth_service import CurrentIdentity

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
async def get_profile(
    identity: CurrentIdentity = Depends(require_token_identity),
    db: AsyncSession = Depends(get_db),
):
    """Profile with watch-list statistics."""
    user, stats = await profile_service.get_full_profile(db, identity.id)
    return success({"user": dump(UserRead, user), "stats": stats.model_dump(by_alias=True)})


@router.put("")
async def update_profile(
    payload: ProfileUpdate,
    identity: CurrentIdentity = Depends(require_token_identity),
    db: AsyncSession = Depends(get_db),
):
    user = await profile_service.update_profile(
        db, identity.id, payload.model_dump(exclude_unset=True, mode="json")
    )
    return success({"user": dump(UserRead, user)}, message="Profile updated successfully")


@router.put("/password")
async def update_password(
    payload: PasswordChange,
    identity: CurrentIdentity = Depends(require_token_identity),
    db: AsyncSession = Depends(get_db),
):
    await profile_service.change_password(db, identity.id, payload.old_password, payload.new_password)
    return success(message="Password updated successfully")


@router.delete("")
async def delete_account(
    identity: CurrentIdentity = Depends(require_token_identity),
    db: AsyncSession = Depends(get_db),
):
    await profile_service.deactivate_account(db, identity.id)
    return success(message="Account deactivated successfully")
