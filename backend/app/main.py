"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.sessions import SessionMiddleware
from sqlalchemy import text

import app.models  # noqa: F401: registers every table on Base.metadata
from app.api import router as api_router
from app.api.responses import failure
from app.config import DEFAULT_JWT_SECRET, get_settings
from app.dependencies.auth import NotAuthenticatedException
from app.dependencies.flash import flash
from app.exceptions import AppError, ValidationError
from app.models.base import engine, AsyncSessionLocal, Base
from app.routes.auth import router as auth_router
from app.routes.htmx import router as htmx_router
from app.routes.web import router as web_router
from app.templating import STATIC_DIR, htmx_error, is_htmx, page_context, templates

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logger.info("Starting %s...", settings.app_name)
    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set; bearer tokens are signed with the insecure default key")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables verified")
    yield
    logger.info("Shutting down...")
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Anime catalogue and personal watch list",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(GZipMiddleware, minimum_size=500)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key,
    max_age=settings.session_max_age,
    https_only=settings.session_https_only,
)


# --- Error handling ---

def _is_api_request(request: Request) -> bool:
    return request.url.path.startswith("/api")


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, ValidationError) and exc.errors:
        return failure(exc.message, exc.status_code, errors=exc.errors)
    return failure(exc.message, exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(loc) or "body",
            "message": str(error.get("msg", "Invalid value")).removeprefix("Value error, "),
        })
    return failure("Validation failed", 400, errors=errors)


@app.exception_handler(NotAuthenticatedException)
async def not_authenticated_handler(request: Request, exc: NotAuthenticatedException):
    """HTMX swaps get an inline error, full page loads go to the login page."""
    if is_htmx(request):
        return htmx_error(request, "You need to log in to do that")
    flash(request, "You need to log in", "error")
    return RedirectResponse("/login", status_code=303)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if _is_api_request(request):
        return failure(str(exc.detail), exc.status_code)
    if exc.status_code == 404:
        return templates.TemplateResponse(
            request, "errors/404.html", page_context(request, title="Page not found"), status_code=404
        )
    return templates.TemplateResponse(
        request, "errors/500.html", page_context(request, title="Error"), status_code=exc.status_code
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if _is_api_request(request):
        return failure("Internal server error", 500)
    return templates.TemplateResponse(
        request, "errors/500.html", {"title": "Error", "current_user": None, "flashes": []}, status_code=500
    )


# Include API routers
app.include_router(api_router)

# Include web routes (HTML pages and HTMX partials)
app.include_router(auth_router)
app.include_router(htmx_router)
app.include_router(web_router)

# Static files
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.get("/health")
async def health_check():
    checks = {}

    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            checks["database"] = {"ok": True}
    except Exception as e:
        checks["database"] = {"ok": False, "message": str(e)}

    all_ok = all(check.get("ok", False) for check in checks.values())
    return {
        "status": "healthy" if all_ok else "degraded",
        "app": settings.app_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }
