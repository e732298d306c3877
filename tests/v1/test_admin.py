"""Tests for moderator endpoints."""

from fastapi import status


def test_non_admin_is_forbidden(client, auth_token) -> None:
    response = client.get("/api/v1/admin/stats", headers=auth_token)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json() == {"error": "Admin access required"}


def test_stats(client, admin_token, test_post) -> None:
    body = client.get("/api/v1/admin/stats", headers=admin_token).json()

    assert body == {
        "total_users": 2,
        "total_posts": 1,
        "total_hashtags": 0,
        "verified_accounts": 0,
        "pending_verification_requests": 0,
    }


def test_list_and_ban_users(client, admin_token, test_user) -> None:
    listed = client.get("/api/v1/admin/users?search=ali", headers=admin_token).json()
    assert [u["id"] for u in listed] == [test_user.id]
    assert listed[0]["is_banned"] is False

    banned = client.post(
        f"/api/v1/admin/users/{test_user.id}/ban",
        json={"reason": "spam"},
        headers=admin_token,
    )
    assert banned.status_code == status.HTTP_200_OK

    listed = client.get("/api/v1/admin/users?search=ali", headers=admin_token).json()
    assert listed[0]["is_banned"] is True
    assert listed[0]["ban_reason"] == "spam"


def test_admin_deletes_any_post(client, admin_token, auth_token, test_post) -> None:
    listed = client.get("/api/v1/admin/posts", headers=admin_token).json()
    assert [p["id"] for p in listed] == [test_post.id]

    response = client.delete(f"/api/v1/admin/posts/{test_post.id}", headers=admin_token)

    assert response.status_code == status.HTTP_200_OK
    assert client.get(f"/api/v1/posts/{test_post.id}", headers=auth_token).status_code == 404


def test_admin_deletes_comment_without_touching_count(
    client, admin_token, auth_token, test_post
) -> None:
    comment = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "off topic"},
        headers=auth_token,
    ).json()

    response = client.delete(f"/api/v1/admin/comments/{comment['id']}", headers=admin_token)

    assert response.status_code == status.HTTP_200_OK
    assert client.get(f"/api/v1/posts/{test_post.id}/comments", headers=auth_token).json() == []
    post = client.get(f"/api/v1/posts/{test_post.id}", headers=auth_token).json()
    assert post["comment_count"] == 1
