from conftest import register


def titles(response) -> list[str]:
    return [anime["title"] for anime in response.json()["data"]["animes"]]


def test_genre_filter(client, catalogue):
    response = client.get("/api/animes", params={"genre": "Seinen"})

    assert response.status_code == 200
    assert titles(response) == ["Death Note"]


def test_year_filter(client, catalogue):
    response = client.get("/api/animes", params={"year": 2013})

    assert titles(response) == ["Attack on Titan"]


def test_sort_by_title(client, catalogue):
    response = client.get("/api/animes", params={"sortBy": "title", "sortOrder": "ASC"})

    result = titles(response)
    assert result[0] == "Attack on Titan"
    assert result[-1] == "Naruto Shippuden"


def test_pagination_metadata_is_camel_case(client, catalogue):
    response = client.get("/api/animes", params={"page": 2, "limit": 2})

    body = response.json()
    assert body["success"] is True
    assert len(body["data"]["animes"]) == 1
    assert body["data"]["pagination"] == {"total": 3, "page": 2, "limit": 2, "totalPages": 2}
    assert "imageUrl" in body["data"]["animes"][0]


def test_invalid_query_is_400_with_field_errors(client, catalogue):
    response = client.get("/api/animes", params={"page": 0})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errors"][0]["field"] == "page"


def test_get_anime_public_and_missing(client, catalogue):
    response = client.get(f"/api/animes/{catalogue['Death Note']}")
    assert response.json()["data"]["anime"]["title"] == "Death Note"
    assert response.json()["data"]["userEntry"] is None

    missing = client.get("/api/animes/9999")
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "error": "Anime not found"}


def test_list_routes_require_token(client, catalogue):
    response = client.post(f"/api/animes/{catalogue['Death Note']}/list")

    assert response.status_code == 401
    assert response.json()["error"] == "Access token required"


def test_bad_token_is_forbidden(client, catalogue):
    response = client.get("/api/animes/mylist/all", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 403


def test_add_with_no_body_uses_defaults(client, catalogue, auth_headers):
    response = client.post(f"/api/animes/{catalogue['Death Note']}/list", headers=auth_headers)

    assert response.status_code == 201
    entry = response.json()["data"]
    assert entry["status"] == "plan-to-watch"
    assert entry["isFavorite"] is False
    assert entry["watchedEpisodes"] == 0
    assert entry["anime"]["title"] == "Death Note"


def test_add_twice_conflicts_then_remove_and_re_add(client, catalogue, auth_headers):
    url = f"/api/animes/{catalogue['Death Note']}/list"

    assert client.post(url, headers=auth_headers).status_code == 201
    duplicate = client.post(url, headers=auth_headers)
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "Anime already in your list"

    removed = client.delete(url, headers=auth_headers)
    assert removed.json() == {"success": True, "message": "Anime removed from your list"}

    assert client.post(url, json={"status": "watching"}, headers=auth_headers).status_code == 201


def test_add_rejects_bad_rating_and_episodes(client, catalogue, auth_headers):
    url = f"/api/animes/{catalogue['Death Note']}/list"

    assert client.post(url, json={"rating": 6}, headers=auth_headers).status_code == 400
    assert client.post(url, json={"watchedEpisodes": -1}, headers=auth_headers).status_code == 400
    assert client.post(url, json={"status": "binging"}, headers=auth_headers).status_code == 400


def test_rating_and_episode_patches(client, catalogue, auth_headers):
    anime_id = catalogue["Attack on Titan"]
    client.post(f"/api/animes/{anime_id}/list", headers=auth_headers)

    rated = client.patch(f"/api/animes/{anime_id}/rating", json={"rating": 5}, headers=auth_headers)
    assert rated.json()["data"]["rating"] == 5

    assert client.patch(f"/api/animes/{anime_id}/rating", json={"rating": 0}, headers=auth_headers).status_code == 400
    assert client.patch(f"/api/animes/{anime_id}/rating", json={}, headers=auth_headers).status_code == 400

    episodes = client.patch(f"/api/animes/{anime_id}/episodes", json={"watchedEpisodes": 25}, headers=auth_headers)
    assert episodes.json()["data"]["watchedEpisodes"] == 25
    assert client.patch(
        f"/api/animes/{anime_id}/episodes", json={"watchedEpisodes": -1}, headers=auth_headers
    ).status_code == 400


def test_partial_update_and_favorite_toggle(client, catalogue, auth_headers):
    anime_id = catalogue["Naruto Shippuden"]
    client.post(f"/api/animes/{anime_id}/list", json={"rating": 3}, headers=auth_headers)

    updated = client.put(f"/api/animes/{anime_id}/list", json={"status": "on-hold"}, headers=auth_headers)
    assert updated.json()["data"]["status"] == "on-hold"
    assert updated.json()["data"]["rating"] == 3

    first = client.patch(f"/api/animes/{anime_id}/favorite", headers=auth_headers)
    second = client.patch(f"/api/animes/{anime_id}/favorite", headers=auth_headers)
    assert first.json()["data"]["isFavorite"] is True
    assert second.json()["data"]["isFavorite"] is False


def test_update_missing_entry_is_404(client, catalogue, auth_headers):
    response = client.put(f"/api/animes/{catalogue['Death Note']}/list", json={"rating": 2}, headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Anime not in your list"


def test_my_list_is_per_user(client, catalogue, auth_headers):
    client.post(f"/api/animes/{catalogue['Death Note']}/list", headers=auth_headers)
    bob = {"Authorization": f"Bearer {register(client, email='bob@example.com', name='Bob')['token']}"}

    mine = client.get("/api/animes/mylist/all", headers=auth_headers).json()["data"]
    bobs = client.get("/api/animes/mylist/all", headers=bob).json()["data"]

    assert [entry["anime"]["title"] for entry in mine] == ["Death Note"]
    assert bobs == []


def test_my_list_paginated_and_filtered(client, catalogue, auth_headers):
    for anime_id in catalogue.values():
        client.post(f"/api/animes/{anime_id}/list", headers=auth_headers)
    client.patch(f"/api/animes/{catalogue['Attack on Titan']}/favorite", headers=auth_headers)

    page = client.get("/api/animes/mylist/all", params={"page": 2, "limit": 2}, headers=auth_headers).json()["data"]
    assert len(page["entries"]) == 1
    assert page["pagination"]["totalPages"] == 2

    favorites = client.get("/api/animes/mylist/all", params={"favorite": "true"}, headers=auth_headers).json()["data"]
    assert [entry["anime"]["title"] for entry in favorites] == ["Attack on Titan"]


def test_get_anime_includes_callers_entry(client, catalogue, auth_headers):
    anime_id = catalogue["Death Note"]
    client.post(f"/api/animes/{anime_id}/list", json={"notes": "L!"}, headers=auth_headers)

    response = client.get(f"/api/animes/{anime_id}", headers=auth_headers)

    assert response.json()["data"]["userEntry"]["notes"] == "L!"
