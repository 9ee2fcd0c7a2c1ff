"""Shared fixtures: a throwaway SQLite database, the app client and seed data."""

import os
import tempfile
from pathlib import Path

_DB_PATH = Path(tempfile.mkdtemp(prefix="mymemorableanimes-")) / "test.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["JWT_SECRET"] = "test-jwt-secret-long-enough-for-hs256"
os.environ["SECRET_KEY"] = "test-session-secret"

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

import app.models  # noqa: E402,F401
from app.main import app  # noqa: E402
from app.models.anime import Anime  # noqa: E402
from app.models.base import AsyncSessionLocal, Base  # noqa: E402
from app.services.jikan_client import JikanClient, get_jikan_client  # noqa: E402

sync_engine = create_engine(f"sqlite:///{_DB_PATH}")

PASSWORD = "Secret123"

CATALOGUE = [
    {"title": "Naruto Shippuden", "year": "2007", "genre": "Shōnen", "rating": "12+"},
    {"title": "Attack on Titan", "year": "2013", "genre": "Shōnen", "rating": "16+"},
    {"title": "Death Note", "year": "2006", "genre": "Seinen", "rating": "16+"},
]


def anime_values(**overrides) -> dict:
    values = {
        "title": "Cowboy Bebop",
        "synopsis": "Bounty hunters in space.",
        "genre": "Sci-Fi",
        "year": "1998",
        "rating": "16+",
        "duration": "24 min",
        "image_url": "/static/img/placeholder.svg",
    }
    values.update(overrides)
    return values


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(sync_engine)
    Base.metadata.create_all(sync_engine)
    yield


@pytest_asyncio.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def catalogue() -> dict[str, int]:
    """The three-title catalogue, as {title: id}."""
    with Session(sync_engine) as session:
        animes = [Anime(**anime_values(**data)) for data in CATALOGUE]
        session.add_all(animes)
        session.commit()
        return {anime.title: anime.id for anime in animes}


def register(client, email="alice@example.com", name="Alice", password=PASSWORD) -> dict:
    response = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def auth_headers(client) -> dict[str, str]:
    token = register(client)["token"]
    return {"Authorization": f"Bearer {token}"}


def mock_jikan(handler) -> None:
    """Route every Jikan call made by the app through ``handler``."""
    transport = httpx.MockTransport(handler)
    app.dependency_overrides[get_jikan_client] = lambda: JikanClient(
        base_url="https://jikan.test/v4", transport=transport
    )
