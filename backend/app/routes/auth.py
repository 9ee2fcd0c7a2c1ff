"""Cookie-session authentication web routes."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies.auth import get_session_identity, login_session, logout_session
from app.dependencies.flash import flash
from app.exceptions import AppError
from app.models.base import get_db
from app.schemas.user import RegisterRequest
from app.services import auth_service
from app.services.auth_service import CurrentIdentity
from app.templating import page_context, templates

logger = logging.getLogger(__name__)

router = APIRouter()


def _first_validation_message(exc: PydanticValidationError) -> str:
    message = exc.errors()[0]["msg"]
    return message.removeprefix("Value error, ")


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    if get_session_identity(request):
        return RedirectResponse("/", status_code=303)
    return templates.TemplateResponse(
        request, "pages/login.html", page_context(request, title="Login")
    )


@router.post("/login")
async def login_submit(request: Request, db: AsyncSession = Depends(get_db)):
    form = await request.form()
    email = str(form.get("email", "")).strip()
    password = str(form.get("password", ""))

    if not email or not password:
        flash(request, "Email and password are required", "error")
        return RedirectResponse("/login", status_code=303)

    try:
        user = await auth_service.validate_credentials(db, email, password)
    except AppError as e:
        flash(request, e.message, "error")
        return RedirectResponse("/login", status_code=303)

    login_session(request, CurrentIdentity.from_user(user))
    logger.info("User %s logged in via session", user.id)
    flash(request, f"Welcome, {user.name}!", "success")
    return RedirectResponse("/", status_code=303)


@router.get("/register", response_class=HTMLResponse)
async def register_page(request: Request):
    if get_session_identity(request):
        return RedirectResponse("/", status_code=303)
    return templates.TemplateResponse(
        request, "pages/register.html", page_context(request, title="Sign up")
    )


@router.post("/register")
async def register_submit(request: Request, db: AsyncSession = Depends(get_db)):
    form = await request.form()
    name = str(form.get("name", "")).strip()
    email = str(form.get("email", "")).strip()
    password = str(form.get("password", ""))

    if not name or not email or not password:
        flash(request, "All fields are required", "error")
        return RedirectResponse("/register", status_code=303)

    try:
        payload = RegisterRequest(name=name, email=email, password=password)
    except PydanticValidationError as e:
        flash(request, _first_validation_message(e), "error")
        return RedirectResponse("/register", status_code=303)

    try:
        user = await auth_service.register_user(db, payload.name, payload.email, payload.password)
    except AppError as e:
        flash(request, e.message, "error")
        return RedirectResponse("/register", status_code=303)

    login_session(request, CurrentIdentity.from_user(user))
    flash(request, f"Account created! Welcome, {user.name}!", "success")
    return RedirectResponse("/", status_code=303)


@router.get("/logout")
async def logout(request: Request):
    logout_session(request)
    return RedirectResponse("/login", status_code=303)
