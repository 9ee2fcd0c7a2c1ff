import jwt
import pytest

from app.exceptions import ConflictError, ForbiddenError, UnauthorizedError
from app.services import auth_service
from app.services.auth_service import CurrentIdentity

from conftest import PASSWORD


async def test_register_hashes_password(db):
    user = await auth_service.register_user(db, "Alice", "alice@example.com", PASSWORD)
    await db.commit()

    assert user.id is not None
    assert user.hashed_password != PASSWORD
    assert len(user.hashed_password) >= 60
    assert auth_service.verify_password(PASSWORD, user.hashed_password)


async def test_register_normalizes_email(db):
    user = await auth_service.register_user(db, "  Alice  ", "  Alice@Example.COM ", PASSWORD)

    assert user.email == "alice@example.com"
    assert user.name == "Alice"
    assert user.is_active is True


async def test_duplicate_email_is_conflict_case_insensitive(db):
    await auth_service.register_user(db, "Alice", "alice@example.com", PASSWORD)

    with pytest.raises(ConflictError, match="Email already registered"):
        await auth_service.register_user(db, "Other Alice", "ALICE@example.com", PASSWORD)


async def test_conflict_keeps_earlier_work_in_the_transaction(db):
    first = await auth_service.register_user(db, "Alice", "alice@example.com", PASSWORD)
    with pytest.raises(ConflictError):
        await auth_service.register_user(db, "Alice", "alice@example.com", PASSWORD)
    await db.commit()

    assert await auth_service.get_user_by_id(db, first.id) is not None


async def test_wrong_password_and_unknown_email_share_message(db):
    await auth_service.register_user(db, "Alice", "alice@example.com", PASSWORD)

    with pytest.raises(UnauthorizedError) as wrong_password:
        await auth_service.validate_credentials(db, "alice@example.com", "Wrong123")
    with pytest.raises(UnauthorizedError) as unknown_email:
        await auth_service.validate_credentials(db, "nobody@example.com", PASSWORD)

    assert wrong_password.value.message == unknown_email.value.message == "Invalid credentials"


async def test_valid_credentials_record_last_login(db):
    await auth_service.register_user(db, "Alice", "alice@example.com", PASSWORD)

    user = await auth_service.validate_credentials(db, "ALICE@example.com", PASSWORD)

    assert user.last_login_at is not None


async def test_inactive_account_cannot_log_in(db):
    user = await auth_service.register_user(db, "Alice", "alice@example.com", PASSWORD)
    user.is_active = False
    await db.flush()

    with pytest.raises(UnauthorizedError, match="Invalid credentials"):
        await auth_service.validate_credentials(db, "alice@example.com", PASSWORD)


def test_token_round_trip():
    identity = CurrentIdentity(id=7, email="alice@example.com", name="Alice")

    token = auth_service.create_access_token(identity)

    assert auth_service.decode_access_token(token) == identity


def test_token_signed_with_another_key_is_forbidden():
    token = jwt.encode(
        {"id": 7, "email": "a@example.com", "name": "A"}, "some-other-secret-long-enough-for-hs256", algorithm="HS256"
    )

    with pytest.raises(ForbiddenError, match="Invalid or expired token"):
        auth_service.decode_access_token(token)


def test_garbage_token_is_forbidden():
    with pytest.raises(ForbiddenError):
        auth_service.decode_access_token("not-a-token")


def test_expired_token_is_forbidden():
    token = jwt.encode(
        {"id": 7, "email": "a@example.com", "name": "A", "exp": 1},
        "test-jwt-secret-long-enough-for-hs256",
        algorithm="HS256",
    )

    with pytest.raises(ForbiddenError):
        auth_service.decode_access_token(token)
