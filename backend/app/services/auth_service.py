"""Authentication helpers: bcrypt password hashing and bearer tokens."""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.exceptions import ConflictError, ForbiddenError, UnauthorizedError
from app.models.user import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class CurrentIdentity:
    """Who is making the request, regardless of token or session auth."""

    id: int
    email: str
    name: str

    @classmethod
    def from_user(cls, user: User) -> "CurrentIdentity":
        return cls(id=user.id, email=user.email, name=user.name)

    def as_dict(self) -> dict:
        return asdict(self)


def hash_password(password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plaintext password against a bcrypt hash."""
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def register_user(db: AsyncSession, name: str, email: str, password: str) -> User:
    """Create an account. Email uniqueness is enforced by the users table."""
    user = User(
        name=name.strip(),
        email=normalize_email(email),
        hashed_password=hash_password(password),
    )

    try:
        async with db.begin_nested():
            db.add(user)
    except IntegrityError:
        logger.info("Registration rejected, email already registered: %s", user.email)
        raise ConflictError("Email already registered") from None

    await db.refresh(user)
    logger.info("Registered user %s (%s)", user.id, user.email)
    return user


async def validate_credentials(db: AsyncSession, email: str, password: str) -> User:
    """Return the active user matching email/password.

    Unknown email, wrong password and deactivated account all produce the same
    error so callers cannot probe which emails exist.
    """
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    user = result.scalar_one_or_none()

    if not user or not user.is_active or not verify_password(password, user.hashed_password):
        logger.warning("Failed login attempt for %s", normalize_email(email))
        raise UnauthorizedError(INVALID_CREDENTIALS)

    user.last_login_at = datetime.now(timezone.utc)
    await db.flush()
    await db.refresh(user)
    return user


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    return await db.get(User, user_id)


def create_access_token(identity: CurrentIdentity) -> str:
    """Sign a time-limited bearer token carrying {id, email, name}."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        **identity.as_dict(),
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_expires_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> CurrentIdentity:
    """Verify signature and expiry. Any failure is a ForbiddenError."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return CurrentIdentity(id=int(payload["id"]), email=payload["email"], name=payload["name"])
    except (jwt.PyJWTError, KeyError, TypeError, ValueError):
        raise ForbiddenError("Invalid or expired token") from None
