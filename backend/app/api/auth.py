"""Token authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.responses import dump, success
from app.dependencies.auth import require_token_identity
from app.exceptions import NotFoundError
from app.models.base import get_db
from app.schemas.user import LoginRequest, RegisterRequest, UserRead
from app.services import auth_service
from app.services.auth_service import CurrentIdentity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201)
async def register(payload: RegisterRequest, db: AsyncSession = Depends(get_db)):
    user = await auth_service.register_user(db, payload.name, payload.email, payload.password)
    token = auth_service.create_access_token(CurrentIdentity.from_user(user))
    return success(
        {"user": dump(UserRead, user), "token": token},
        message="User registered successfully",
    )


@router.post("/login")
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await auth_service.validate_credentials(db, payload.email, payload.password)
    token = auth_service.create_access_token(CurrentIdentity.from_user(user))
    logger.info("User %s logged in via API", user.id)
    return success({"user": dump(UserRead, user), "token": token}, message="Login successful")


@router.post("/logout")
async def logout():
    """Tokens are stateless; the client discards its copy."""
    return success(message="Logout successful. Please remove the token from client-side storage.")


@router.get("/profile")
async def get_profile(
    identity: CurrentIdentity = Depends(require_token_identity),
    db: AsyncSession = Depends(get_db),
):
    user = await auth_service.get_user_by_id(db, identity.id)
    if not user:
        raise NotFoundError("User not found")
    return success({"user": dump(UserRead, user)})
