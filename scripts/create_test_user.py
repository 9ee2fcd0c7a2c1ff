"""Create a login for manual testing (test@test.com / Test123!).

Usage:
    python -m scripts.create_test_user
"""

import asyncio

import app.models  # noqa: F401
from app.exceptions import ConflictError
from app.models.base import AsyncSessionLocal, Base, engine
from app.services.auth_service import register_user

TEST_USER = {
    "name": "Usuário Teste",
    "email": "test@test.com",
    "password": "Test123!",
}


async def create_test_user() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        try:
            user = await register_user(db, **TEST_USER)
            await db.commit()
            print(f"Test user created (id {user.id})")
        except ConflictError:
            await db.rollback()
            print("Test user already exists")

    print(f"Login with: {TEST_USER['email']} / {TEST_USER['password']}")


if __name__ == "__main__":
    asyncio.run(create_test_user())
