"""Tests for the relationship store adapter."""

import pytest

from huddle.core.errors import StoreConflictError, StoreError
from huddle.models import Hashtag, Post, Profile
from huddle.models.verification import VerificationState


def test_adjust_counter_increments_and_decrements(store, db_session, test_user) -> None:
    store.adjust_counter(Profile, test_user.id, "follower_count", 1)
    store.adjust_counter(Profile, test_user.id, "follower_count", 1)
    store.adjust_counter(Profile, test_user.id, "follower_count", -1)

    assert store.get_profile(test_user.id).follower_count == 1


def test_adjust_counter_clamps_at_zero(store, test_post) -> None:
    store.adjust_counter(Post, test_post.id, "like_count", -1)

    assert store.get_post(test_post.id).like_count == 0


def test_adjust_counter_rejects_non_counter_columns(store, test_user) -> None:
    with pytest.raises(ValueError):
        store.adjust_counter(Profile, test_user.id, "username", 1)


def test_adjust_counter_missing_row_is_store_error(store) -> None:
    with pytest.raises(StoreError):
        store.adjust_counter(Hashtag, "missing", "post_count", 1)


def test_insert_follow_violating_foreign_key_is_conflict(store, test_user) -> None:
    with pytest.raises(StoreConflictError):
        store.insert_follow(test_user.id, "ghost")


def test_store_remains_usable_after_failed_write(store, test_user, other_user) -> None:
    with pytest.raises(StoreConflictError):
        store.insert_follow(test_user.id, "ghost")

    store.insert_follow(test_user.id, other_user.id)

    assert store.get_follow(test_user.id, other_user.id) is not None


def test_delete_follow_reports_whether_a_row_went_away(store, test_user, other_user) -> None:
    store.insert_follow(test_user.id, other_user.id)

    assert store.delete_follow(test_user.id, other_user.id) is True
    assert store.delete_follow(test_user.id, other_user.id) is False


def test_insert_or_get_hashtag_returns_single_row(store) -> None:
    first = store.insert_or_get_hashtag("#news")
    second = store.insert_or_get_hashtag("#news")

    assert first.id == second.id
    assert store.count_hashtags() == 1
    assert second.post_count == 0


def test_liked_post_ids_returns_subset(store, make_post, test_user, other_user) -> None:
    liked = make_post(other_user, "one")
    unliked = make_post(other_user, "two")
    store.insert_like(liked.id, test_user.id)

    assert store.liked_post_ids(test_user.id, [liked.id, unliked.id]) == {liked.id}
    assert store.liked_post_ids(test_user.id, []) == set()


def test_delete_post_cascades_to_edges(store, test_post, other_user) -> None:
    store.insert_like(test_post.id, other_user.id)
    store.insert_comment(test_post.id, other_user.id, "nice")
    hashtag = store.insert_or_get_hashtag("#gone")
    store.link_post_hashtag(test_post.id, hashtag.id)

    assert store.delete_post(test_post.id) is True

    assert store.get_like(test_post.id, other_user.id) is None
    assert store.list_comments(test_post.id) == []
    assert store.list_post_hashtag_links(test_post.id) == []


def test_list_posts_orders_newest_first(store, make_post, test_user) -> None:
    older = make_post(test_user, "older")
    newer = make_post(test_user, "newer")

    ids = [post.id for post in store.list_posts(offset=0, limit=10)]

    assert ids == [newer.id, older.id]


def test_search_profiles_is_case_insensitive(store, test_user, other_user) -> None:
    hits = store.search_profiles("ALI", limit=10)

    assert [profile.id for profile in hits] == [test_user.id]


def test_search_treats_wildcards_literally(store, make_post, test_user) -> None:
    make_post(test_user, "100% organic")
    make_post(test_user, "1000 things")

    hits = store.search_posts("100%", limit=10)

    assert [post.content for post in hits] == ["100% organic"]


def test_second_active_verification_request_is_conflict(store, test_user) -> None:
    store.insert_verification_request(test_user.id, VerificationState.PENDING.value)

    with pytest.raises(StoreConflictError):
        store.insert_verification_request(test_user.id, VerificationState.PENDING.value)


def test_rejected_requests_do_not_block_new_ones(store, test_user) -> None:
    store.insert_verification_request(test_user.id, VerificationState.REJECTED.value)
    store.insert_verification_request(test_user.id, VerificationState.REJECTED.value)

    request = store.insert_verification_request(test_user.id, VerificationState.PENDING.value)

    assert store.find_active_verification_request(test_user.id).id == request.id


def test_update_profile_missing_returns_none(store) -> None:
    assert store.update_profile("missing", {"bio": "hi"}) is None
