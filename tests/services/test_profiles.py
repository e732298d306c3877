"""Tests for profile creation, updates and views."""

from unittest.mock import patch

import pytest

from huddle.core.errors import ConflictError, NotFoundError, StoreError, ValidationFailedError
from huddle.services.counters import CounterReconciliationEngine
from huddle.services.media import MediaUpload
from huddle.services.profiles import ProfileService


def test_create_profile_starts_with_zero_counters(store) -> None:
    profile = ProfileService(store).create_profile("sub-1", "carol")

    assert profile.display_name == "carol"
    assert profile.follower_count == 0
    assert profile.following_count == 0
    assert profile.is_verified is False


def test_create_profile_requires_username(store) -> None:
    with pytest.raises(ValidationFailedError):
        ProfileService(store).create_profile("sub-1", "  ")


def test_create_profile_rejects_taken_username(store, test_user) -> None:
    with pytest.raises(ConflictError) as excinfo:
        ProfileService(store).create_profile("sub-2", test_user.username)

    assert excinfo.value.reason == "username_taken"


def test_update_profile_applies_fields(store, media_storage, test_user) -> None:
    avatar = MediaUpload(filename="me.jpg", content_type="image/jpeg", data=b"jpg")

    updated = ProfileService(store, media_storage).update_profile(
        test_user.id,
        bio="hello",
        avatar=avatar,
    )

    assert updated.bio == "hello"
    assert updated.display_name == "Alice"
    assert "/avatars/" in updated.avatar_url


def test_update_profile_skips_failed_upload(store, media_storage, test_user) -> None:
    avatar = MediaUpload(filename="me.jpg", content_type="image/jpeg", data=b"jpg")

    with patch.object(media_storage, "upload", side_effect=StoreError("bucket offline")):
        updated = ProfileService(store, media_storage).update_profile(
            test_user.id,
            display_name="Alice A.",
            avatar=avatar,
        )

    assert updated.display_name == "Alice A."
    assert updated.avatar_url is None


def test_update_profile_requires_changes(store, test_user) -> None:
    with pytest.raises(ValidationFailedError):
        ProfileService(store).update_profile(test_user.id)


def test_profile_view_reports_follow_state_and_likes(store, make_post, test_user, other_user) -> None:
    engine = CounterReconciliationEngine(store)
    first = make_post(test_user, "first")
    second = make_post(test_user, "second")
    engine.toggle_like(other_user.id, first.id)
    engine.toggle_like(other_user.id, second.id)
    engine.follow(other_user.id, test_user.id)

    page = ProfileService(store).get_profile_view(other_user.id, "alice")

    assert page.profile.is_following is True
    assert page.profile.total_likes_received == 2
    assert page.profile.follower_count == 1
    assert [post.id for post in page.posts] == [second.id, first.id]

    own = ProfileService(store).get_profile_view(test_user.id, "alice")
    assert own.profile.is_following is False


def test_profile_view_unknown_username(store, test_user) -> None:
    with pytest.raises(NotFoundError):
        ProfileService(store).get_profile_view(test_user.id, "nobody")


def test_followers_and_following_lists(store, test_user, other_user) -> None:
    CounterReconciliationEngine(store).follow(test_user.id, other_user.id)
    service = ProfileService(store)

    assert [p.id for p in service.list_followers(other_user.id)] == [test_user.id]
    assert [p.id for p in service.list_following(test_user.id)] == [other_user.id]
    assert service.list_followers(test_user.id) == []
