"""Tests for search and hashtag endpoints."""

from fastapi import status


def _post(client, headers, content: str) -> dict:
    response = client.post("/api/v1/posts/", data={"content": content}, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_search_by_type(client, auth_token, other_user) -> None:
    _post(client, auth_token, "ship it #release")

    users = client.get("/api/v1/search/?q=BOB&type=users", headers=auth_token).json()
    posts = client.get("/api/v1/search/?q=ship&type=posts", headers=auth_token).json()

    assert [u["username"] for u in users["users"]] == ["bob"]
    assert users["posts"] == [] and users["hashtags"] == []
    assert [p["content"] for p in posts["posts"]] == ["ship it #release"]


def test_search_requires_query(client, auth_token) -> None:
    response = client.get("/api/v1/search/", headers=auth_token)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Search query required"}


def test_trending(client, auth_token) -> None:
    _post(client, auth_token, "#a #b")
    _post(client, auth_token, "#b again")

    trending = client.get("/api/v1/search/trending", headers=auth_token).json()

    assert [(t["tag"], t["post_count"]) for t in trending] == [("#b", 2), ("#a", 1)]


def test_hashtag_page(client, auth_token) -> None:
    created = _post(client, auth_token, "breaking #News")

    response = client.get("/api/v1/search/hashtag/news", headers=auth_token)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["hashtag"]["tag"] == "#news"
    assert [p["id"] for p in body["posts"]] == [created["id"]]
    assert body["posts"][0]["is_liked"] is False


def test_unknown_hashtag(client, auth_token) -> None:
    response = client.get("/api/v1/search/hashtag/nothing", headers=auth_token)

    assert response.status_code == status.HTTP_404_NOT_FOUND
