"""Tests for post, feed, like and comment endpoints."""

from fastapi import status


def test_create_text_post(client, auth_token, test_user) -> None:
    response = client.post("/api/v1/posts/", data={"content": "hello #World"}, headers=auth_token)

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["content"] == "hello #World"
    assert body["user_id"] == test_user.id
    assert body["author"]["username"] == "alice"
    assert body["like_count"] == 0


def test_create_post_with_media(client, auth_token) -> None:
    response = client.post(
        "/api/v1/posts/",
        files={"media": ("song.mp3", b"ID3-data", "audio/mpeg")},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["content"] == ""
    assert body["media_type"] == "audio"
    assert body["media_url"].endswith(".mp3")


def test_create_empty_post(client, auth_token) -> None:
    response = client.post("/api/v1/posts/", data={"content": ""}, headers=auth_token)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Post must have content or media"}


def test_feed_pagination(client, auth_token, make_post, test_user) -> None:
    posts = [make_post(test_user, f"post {n}") for n in range(3)]

    first = client.get("/api/v1/posts/feed?page=1&limit=2", headers=auth_token).json()
    second = client.get("/api/v1/posts/feed?page=2&limit=2", headers=auth_token).json()

    assert [p["id"] for p in first["posts"]] == [posts[2].id, posts[1].id]
    assert [p["id"] for p in second["posts"]] == [posts[0].id]
    assert first["page"] == 1
    assert first["page_size"] == 2


def test_feed_rejects_oversized_page(client, auth_token) -> None:
    response = client.get("/api/v1/posts/feed?limit=500", headers=auth_token)

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_like_toggle(client, auth_token, other_auth_token, test_post) -> None:
    liked = client.post(f"/api/v1/posts/{test_post.id}/like", headers=other_auth_token)
    assert liked.json() == {"message": "Post liked", "is_liked": True}

    as_liker = client.get(f"/api/v1/posts/{test_post.id}", headers=other_auth_token).json()
    as_author = client.get(f"/api/v1/posts/{test_post.id}", headers=auth_token).json()
    assert as_liker["is_liked"] is True
    assert as_liker["like_count"] == 1
    assert as_author["is_liked"] is False

    unliked = client.post(f"/api/v1/posts/{test_post.id}/like", headers=other_auth_token)
    assert unliked.json() == {"message": "Post unliked", "is_liked": False}
    after = client.get(f"/api/v1/posts/{test_post.id}", headers=auth_token).json()
    assert after["like_count"] == 0


def test_like_missing_post(client, auth_token) -> None:
    response = client.post("/api/v1/posts/missing/like", headers=auth_token)

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Post not found"}


def test_comments(client, auth_token, other_auth_token, test_post, other_user) -> None:
    created = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "first!"},
        headers=other_auth_token,
    )
    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["author"]["id"] == other_user.id

    listed = client.get(f"/api/v1/posts/{test_post.id}/comments", headers=auth_token).json()
    assert [c["content"] for c in listed] == ["first!"]

    post = client.get(f"/api/v1/posts/{test_post.id}", headers=auth_token).json()
    assert post["comment_count"] == 1


def test_blank_comment_rejected(client, auth_token, test_post) -> None:
    response = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": " "},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Comment content required"}


def test_delete_post_owner_only(client, auth_token, other_auth_token, test_post) -> None:
    forbidden = client.delete(f"/api/v1/posts/{test_post.id}", headers=other_auth_token)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    deleted = client.delete(f"/api/v1/posts/{test_post.id}", headers=auth_token)
    assert deleted.status_code == status.HTTP_200_OK

    missing = client.get(f"/api/v1/posts/{test_post.id}", headers=auth_token)
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_comment_without_content_field(client, auth_token, test_post) -> None:
    response = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Comment content required"}
