import httpx
import pytest

from app.exceptions import NotFoundError
from app.services.import_service import PLACEHOLDER_IMAGE, map_external_anime
from app.services.jikan_client import JikanClient

from conftest import mock_jikan

FRIEREN = {
    "mal_id": 52991,
    "title": "Sousou no Frieren",
    "title_english": "Frieren: Beyond Journey's End",
    "synopsis": "An elf mage outlives her party.",
    "genres": [{"name": "Adventure"}, {"name": "Drama"}, {"name": "Fantasy"}],
    "year": 2023,
    "score": 9.3,
    "rating": "PG-13 - Teens 13 or older",
    "duration": "24 min per ep",
    "images": {
        "jpg": {"image_url": "https://cdn.example.com/frieren.jpg", "large_image_url": "https://cdn.example.com/frieren-l.jpg"},
        "webp": {"image_url": "https://cdn.example.com/frieren.webp", "large_image_url": "https://cdn.example.com/frieren-l.webp"},
    },
    "trailer": {"images": {"maximum_image_url": "https://cdn.example.com/frieren-bg.jpg"}},
}


def jikan_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/v4/anime" and request.url.params.get("q"):
        return httpx.Response(200, json={"data": [FRIEREN]})
    if path == "/v4/anime/52991":
        return httpx.Response(200, json={"data": FRIEREN})
    if path.startswith("/v4/anime/"):
        return httpx.Response(404, json={"status": 404, "message": "Resource does not exist"})
    if path == "/v4/top/anime":
        return httpx.Response(200, json={"data": [FRIEREN], "pagination": {"has_next_page": True}})
    return httpx.Response(500)


def test_map_prefers_large_webp_and_numeric_score():
    values = map_external_anime({"data": FRIEREN})

    assert values["id"] == 52991
    assert values["genre"] == "Adventure, Drama, Fantasy"
    assert values["year"] == "2023"
    assert values["rating"] == "9.3"
    assert values["score"] == 9.3
    assert values["image_url"] == "https://cdn.example.com/frieren-l.webp"
    assert values["background_image"] == "https://cdn.example.com/frieren-bg.jpg"


def test_map_fallbacks():
    values = map_external_anime({
        "mal_id": 1,
        "title_japanese": "カウボーイビバップ",
        "aired": {"from": "1998-04-03T00:00:00+00:00"},
        "rating": "R - 17+",
    })

    assert values["title"] == "カウボーイビバップ"
    assert values["year"] == "1998"
    assert values["rating"] == "R - 17+"
    assert values["score"] is None
    assert values["image_url"] == PLACEHOLDER_IMAGE
    assert values["duration"] == "N/A"


def test_map_without_id_is_not_found():
    with pytest.raises(NotFoundError):
        map_external_anime({"data": {"title": "Nameless"}})


async def test_client_blank_search_skips_request():
    def fail(request):
        raise AssertionError("no request expected")

    client = JikanClient(base_url="https://jikan.test/v4", transport=httpx.MockTransport(fail))

    assert await client.search("   ") == {"data": []}


async def test_client_raises_on_http_error():
    client = JikanClient(base_url="https://jikan.test/v4", transport=httpx.MockTransport(jikan_handler))

    with pytest.raises(httpx.HTTPStatusError):
        await client.random()


def test_search_requires_title(client):
    response = client.get("/api/external/search")

    assert response.status_code == 400
    assert response.json()["error"] == "Missing or invalid title parameter"


def test_search_passes_through(client):
    mock_jikan(jikan_handler)

    response = client.get("/api/external/search", params={"title": "frieren"})

    assert response.status_code == 200
    assert response.json()["data"]["data"][0]["mal_id"] == 52991


def test_top_passes_through(client):
    mock_jikan(jikan_handler)

    response = client.get("/api/external/top")

    assert response.json()["data"]["pagination"] == {"has_next_page": True}


def test_upstream_failure_is_502(client):
    mock_jikan(jikan_handler)

    response = client.get("/api/external/random")

    assert response.status_code == 502
    assert response.json() == {"success": False, "error": "Failed to fetch random anime from Jikan API"}


def test_unknown_external_anime_is_404(client):
    mock_jikan(jikan_handler)

    response = client.get("/api/external/anime/1")

    assert response.status_code == 404


def test_import_creates_and_favorites(client, auth_headers):
    mock_jikan(jikan_handler)

    response = client.post("/api/external/anime/52991/import", headers=auth_headers)

    assert response.status_code == 201
    entry = response.json()["data"]
    assert entry["isFavorite"] is True
    assert entry["anime"]["id"] == 52991
    assert entry["anime"]["title"] == "Sousou no Frieren"

    local = client.get("/api/animes/52991")
    assert local.json()["data"]["anime"]["genre"] == "Adventure, Drama, Fantasy"


def test_import_twice_overwrites_and_keeps_one_entry(client, auth_headers):
    mock_jikan(jikan_handler)
    client.post("/api/external/anime/52991/import", headers=auth_headers)
    client.patch("/api/animes/52991/favorite", headers=auth_headers)

    again = client.post("/api/external/anime/52991/import", headers=auth_headers)
    my_list = client.get("/api/animes/mylist/all", headers=auth_headers).json()["data"]

    assert again.status_code == 201
    assert again.json()["data"]["isFavorite"] is True
    assert len(my_list) == 1


def test_import_unknown_anime(client, auth_headers):
    mock_jikan(jikan_handler)

    response = client.post("/api/external/anime/1/import", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Anime not found"


def test_import_requires_token(client):
    mock_jikan(jikan_handler)

    assert client.post("/api/external/anime/52991/import").status_code == 401
