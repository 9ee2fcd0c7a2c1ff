"""JSON API router aggregation."""

from fastapi import APIRouter

from app.api.animes import router as animes_router
from app.api.auth import router as auth_router
from app.api.profile import router as profile_router
from app.api.external import router as external_router

router = APIRouter(prefix="/api")

router.include_router(auth_router)
router.include_router(profile_router)
router.include_router(animes_router)
router.include_router(external_router)
