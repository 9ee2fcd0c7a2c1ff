"""Authentication dependencies for FastAPI routes.

Two adapters resolve the same ``CurrentIdentity``: bearer tokens for the JSON
API and the cookie session for HTML pages and HTMX partials.
"""

from fastapi import Request

from app.exceptions import UnauthorizedError, ForbiddenError
from app.services.auth_service import CurrentIdentity, decode_access_token

SESSION_USER_KEY = "user"


class NotAuthenticatedException(Exception):
    """Raised when an HTML route requires login but there is no session."""
    pass


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_token_identity(request: Request) -> CurrentIdentity:
    """Return the bearer-token identity or raise 401 (missing) / 403 (invalid)."""
    token = _bearer_token(request)
    if not token:
        raise UnauthorizedError("Access token required")
    return decode_access_token(token)


async def get_optional_token_identity(request: Request) -> CurrentIdentity | None:
    """Identity for public routes that personalise when a valid token is sent."""
    token = _bearer_token(request)
    if not token:
        return None
    try:
        return decode_access_token(token)
    except ForbiddenError:
        return None


def get_session_identity(request: Request) -> CurrentIdentity | None:
    """Return the logged-in session identity or None."""
    data = request.session.get(SESSION_USER_KEY)
    if not data:
        return None
    try:
        return CurrentIdentity(id=int(data["id"]), email=data["email"], name=data["name"])
    except (KeyError, TypeError, ValueError):
        request.session.pop(SESSION_USER_KEY, None)
        return None


def require_session_identity(request: Request) -> CurrentIdentity:
    """Return the session identity, or hand off to the login redirect / HTMX error."""
    identity = get_session_identity(request)
    if not identity:
        raise NotAuthenticatedException()
    return identity


def login_session(request: Request, identity: CurrentIdentity) -> None:
    request.session[SESSION_USER_KEY] = identity.as_dict()


def logout_session(request: Request) -> None:
    request.session.clear()
