"""
Tests for the composition root and session helpers.
"""

import pytest
from conftest import follower_query, following_query, is_following_query, user_query

from swr_cache import CacheContainer, IdentityPendingError, QueryDescriptor
from swr_cache.repositories import MemorySlotStorage, StaticIdentityProvider
from swr_cache.services import VisitTracker
from swr_cache.utils.keys import derive_key

ANNA = {"id": "u1", "name": "Anna"}


@pytest.fixture
def identity():
    """Create a resolved session for viewer u2."""
    return StaticIdentityProvider(viewer_id="u2")


@pytest.fixture
def session_storage():
    return MemorySlotStorage()


@pytest.fixture
def container(transport, identity, session_storage, clock):
    """Create a container on in-memory storage."""
    return CacheContainer(
        transport=transport,
        identity=identity,
        session_storage=session_storage,
        origin_storage=MemorySlotStorage(),
        clock=clock,
    )


def resolve_profile(transport, is_following: bool = True) -> None:
    transport.publish(user_query("anna"), ANNA)
    transport.publish(follower_query("u1"), 3)
    transport.publish(following_query("u1"), 5)
    transport.publish(is_following_query("u2", "u1"), is_following)


def test_views_wait_for_identity(transport, session_storage):
    """No view is keyed until the session has resolved."""
    identity = StaticIdentityProvider.pending()
    container = CacheContainer(
        transport=transport,
        identity=identity,
        session_storage=session_storage,
        origin_storage=MemorySlotStorage(),
    )

    with pytest.raises(IdentityPendingError):
        container.full_profile_view("anna")

    identity.resolve(None)
    assert container.full_profile_view("anna").key == derive_key("anna")


def test_profile_view_end_to_end(container, transport):
    with container.full_profile_view("anna") as view:
        resolve_profile(transport)
        snap = view.snapshot()

    assert snap.data.is_following is True
    assert snap.data.follower_count == 3
    assert container.profile_cache.get(derive_key("anna", "u2")) is not None


def test_cache_is_partitioned_by_viewer(container, transport, identity):
    """A different viewer never sees another viewer's cached flags."""
    with container.full_profile_view("anna"):
        resolve_profile(transport)

    identity.resolve("u3")
    view = container.full_profile_view("anna")
    first = view.mount()

    assert first.is_loading
    assert view.key == derive_key("anna", "u3")
    view.unmount()


def test_revisit_is_served_from_cache(container, transport):
    with container.full_profile_view("anna"):
        resolve_profile(transport)

    again = container.full_profile_view("anna")
    first = again.mount()

    assert not first.is_loading
    assert first.data.user.name == "Anna"
    again.unmount()


def test_post_view_personalized_by_viewer(container, transport):
    view = container.cached_post_view("p1")
    view.mount()

    assert transport.subscriber_count(QueryDescriptor.of("getPost", post_id="p1", user_id="u2")) == 1

    transport.publish(QueryDescriptor.of("getPost", post_id="p1", user_id="u2"), {"id": "p1", "likes": 2})

    assert view.snapshot().data.post_id == "p1"
    assert container.post_cache.get(derive_key("p1", "u2")) is not None
    view.unmount()


def test_anonymous_post_view_omits_viewer(transport, session_storage):
    container = CacheContainer(
        transport=transport,
        identity=StaticIdentityProvider(viewer_id=None),
        session_storage=session_storage,
        origin_storage=MemorySlotStorage(),
    )
    view = container.cached_post_view("p1")
    view.mount()

    assert transport.subscriber_count(QueryDescriptor.of("getPost", post_id="p1")) == 1
    view.unmount()


def test_reset_session_keeps_lists(container, transport):
    with container.full_profile_view("anna"):
        resolve_profile(transport)
    container.collections.set_posts("feed", [{"id": "p1"}])

    container.reset_session()

    assert len(container.profile_cache) == 0
    assert container.collections.get_posts("feed") == [{"id": "p1"}]


def test_image_memo_uses_recent_fetches(container):
    """URLs fetched recently count as loaded through the shared probe."""
    url = "https://demo.convex.cloud/api/storage/abc?token=1"
    container.image_probe.record_fetch(url)

    assert container.image_memo.is_loaded(url)
    assert container.image_memo.is_loaded("https://demo.convex.cloud/api/storage/abc?token=2")


class TestVisitTracker:
    def test_first_visit_then_revisit(self, session_storage):
        visits = VisitTracker(storage=session_storage)

        assert visits.is_first_visit("u1")
        visits.mark_visited("u1")
        assert not visits.is_first_visit("u1")
        assert visits.is_first_visit("u9")
        assert session_storage.slots["profile_visited_u1"] == "true"

    def test_unavailable_storage_counts_as_first_visit(self):
        visits = VisitTracker(storage=MemorySlotStorage(available=False))

        visits.mark_visited("u1")

        assert visits.is_first_visit("u1")
