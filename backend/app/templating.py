"""Shared Jinja2 environment and page context for the HTML routes."""

from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from app.config import get_settings
from app.dependencies.auth import get_session_identity
from app.dependencies.flash import pop_flashes
from app.models.watch_list_entry import WATCH_STATUSES

APP_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = APP_DIR / "templates"
STATIC_DIR = APP_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["app_name"] = get_settings().app_name
templates.env.globals["watch_statuses"] = WATCH_STATUSES


def page_context(request: Request, **extra) -> dict:
    """Build common template context with current_user, flashes and current path."""
    return {
        "current_user": get_session_identity(request),
        "flashes": pop_flashes(request),
        "current_path": request.url.path,
        **extra,
    }


def is_htmx(request: Request) -> bool:
    return request.headers.get("HX-Request", "").lower() == "true"


def htmx_error(request: Request, message: str, status_code: int = 200):
    """Inline error fragment for HTMX swaps (2xx so HTMX swaps it in)."""
    return templates.TemplateResponse(
        request, "partials/htmx/error.html", {"error": message}, status_code=status_code
    )


def swap_target(request: Request, default: str) -> str:
    """Id of the element HTMX is swapping into, so re-rendered buttons keep targeting it."""
    return request.headers.get("HX-Target") or default
