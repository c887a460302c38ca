"""
Tests for the multi-source join.
"""

import pytest
from conftest import follower_query, following_query, is_following_query, user_query

from swr_cache import CompositeProfile, QueryDescriptor, UserSummary
from swr_cache.entities import SourceStatus
from swr_cache.services import JoinContext, MultiSourceJoin, SourceSpec, post_join, profile_join

ANNA = {"id": "u1", "name": "Anna"}


@pytest.fixture
def published(transport):
    """Collect every ready result a join publishes."""

    def attach(join):
        results = []
        join.subscribe(results.append)
        return results

    return attach


def test_anonymous_profile_scenario(transport, published):
    """User, follower and following counts resolve; no viewer -> not following."""
    join = profile_join(transport, "anna", viewer_id=None)
    results = published(join)
    join.start()

    transport.publish(user_query("anna"), ANNA)
    transport.publish(follower_query("u1"), 3)
    assert not join.ready
    transport.publish(following_query("u1"), 5)

    assert join.ready
    assert join.found
    assert join.value == CompositeProfile(
        user=UserSummary(id="u1", name="Anna"),
        follower_count=3,
        following_count=5,
        is_following=False,
    )
    assert join.states["is_following"].status is SourceStatus.SKIPPED
    assert len(results) == 1


def test_dependents_wait_for_root(transport):
    """Dependent queries are not started before the user id is known."""
    join = profile_join(transport, "anna", viewer_id=None)
    join.start()

    assert transport.subscriber_count() == 1
    assert join.progress == (0, 1)

    transport.publish(user_query("anna"), ANNA)

    assert transport.subscriber_count() == 3
    assert join.progress == (1, 3)


def test_resolution_order_does_not_matter(transport):
    """Counts known before the user still produce the same composite."""
    transport.publish(follower_query("u1"), 3)
    transport.publish(following_query("u1"), 5)

    join = profile_join(transport, "anna", viewer_id=None)
    join.start()
    assert not join.ready

    transport.publish(user_query("anna"), ANNA)

    assert join.ready
    assert join.value.follower_count == 3
    assert join.value.following_count == 5


def test_all_results_already_cached_in_transport(transport):
    """Synchronous delivery inside subscribe() still converges."""
    transport.publish(user_query("anna"), ANNA)
    transport.publish(follower_query("u1"), 1)
    transport.publish(following_query("u1"), 2)

    join = profile_join(transport, "anna", viewer_id=None)
    join.start()

    assert join.ready
    assert join.progress == (3, 3)


def test_root_not_found_is_ready_without_dependents(transport, published):
    """A missing user is a terminal state; dependents never start."""
    join = profile_join(transport, "ghost", viewer_id="u2")
    results = published(join)
    join.start()

    transport.publish(user_query("ghost"), None)

    assert join.ready
    assert not join.found
    assert join.value is None
    assert transport.subscriber_count() == 1
    assert results[-1].found is False


def test_viewer_relative_source_blocks_when_viewer_present(transport):
    """With a viewer, the follow flag must resolve too."""
    join = profile_join(transport, "anna", viewer_id="u2")
    join.start()
    transport.publish(user_query("anna"), ANNA)
    transport.publish(follower_query("u1"), 3)
    transport.publish(following_query("u1"), 5)

    assert not join.ready
    assert join.progress == (3, 4)

    transport.publish(is_following_query("u2", "u1"), True)

    assert join.ready
    assert join.value.is_following is True


def test_absent_count_falls_back_to_default(transport):
    """A count query resolving to absent reads as zero."""
    join = profile_join(transport, "anna", viewer_id=None)
    join.start()
    transport.publish(user_query("anna"), ANNA)
    transport.publish(follower_query("u1"), None)
    transport.publish(following_query("u1"), 5)

    assert join.ready
    assert join.value.follower_count == 0


def test_ready_is_stable_without_value_change(transport, published):
    """Re-publishing identical values keeps the join ready and silent."""
    join = profile_join(transport, "anna", viewer_id=None)
    results = published(join)
    join.start()
    transport.publish(user_query("anna"), ANNA)
    transport.publish(follower_query("u1"), 3)
    transport.publish(following_query("u1"), 5)

    transport.publish(follower_query("u1"), 3)
    transport.publish(user_query("anna"), dict(ANNA))

    assert join.ready
    assert len(results) == 1


def test_source_change_recomputes_composite(transport, published):
    """Any source update rebuilds the composite from current values."""
    join = profile_join(transport, "anna", viewer_id=None)
    results = published(join)
    join.start()
    transport.publish(user_query("anna"), ANNA)
    transport.publish(follower_query("u1"), 3)
    transport.publish(following_query("u1"), 5)

    transport.publish(follower_query("u1"), 4)

    assert len(results) == 2
    assert results[-1].value.follower_count == 4
    assert results[-1].value.following_count == 5


def test_root_change_restarts_dependents(transport):
    """A new user id re-parameterizes dependents, which are pending again."""
    join = profile_join(transport, "anna", viewer_id=None)
    join.start()
    transport.publish(user_query("anna"), ANNA)
    transport.publish(follower_query("u1"), 3)
    transport.publish(following_query("u1"), 5)

    transport.publish(user_query("anna"), {"id": "u9", "name": "Anna"})

    assert not join.ready
    assert transport.subscriber_count(follower_query("u1")) == 0
    assert transport.subscriber_count(follower_query("u9")) == 1


def test_root_disappearing_cancels_dependents(transport):
    """If the user is deleted, dependent queries are dropped."""
    join = profile_join(transport, "anna", viewer_id=None)
    join.start()
    transport.publish(user_query("anna"), ANNA)

    transport.publish(user_query("anna"), None)

    assert join.ready
    assert not join.found
    assert transport.subscriber_count() == 1


def test_stop_cancels_everything(transport, published):
    """After stop() no subscription stays open and no listener fires."""
    join = profile_join(transport, "anna", viewer_id=None)
    results = published(join)
    join.start()
    transport.publish(user_query("anna"), ANNA)

    join.stop()
    transport.publish(follower_query("u1"), 3)
    transport.publish(following_query("u1"), 5)

    assert transport.subscriber_count() == 0
    assert results == []


def test_post_join_passes_viewer(transport):
    """The post query is personalized by the viewer."""
    join = post_join(transport, "p1", viewer_id="u2")
    join.start()

    transport.publish(QueryDescriptor.of("getPost", post_id="p1", user_id="u2"), {"id": "p1", "likedByUser": True})

    assert join.ready
    assert join.value.post == {"id": "p1", "likedByUser": True}
    assert join.value.post_id == "p1"


def test_generic_join_with_custom_compose(transport):
    """Joins are not tied to the profile shape."""
    join = MultiSourceJoin(
        transport=transport,
        sources=[
            SourceSpec("event", "getEvent", lambda ctx, _: {"event_id": ctx.root_id}),
            SourceSpec(
                "participants",
                "getParticipants",
                lambda ctx, values: {"event_id": values["event"]["id"]} if values.get("event") else None,
                default=[],
            ),
        ],
        compose=lambda values: (values["event"]["id"], len(values["participants"])),
        context=JoinContext(root_id="e1"),
    )
    join.start()
    transport.publish(QueryDescriptor.of("getEvent", event_id="e1"), {"id": "e1"})
    transport.publish(QueryDescriptor.of("getParticipants", event_id="e1"), ["u1", "u2"])

    assert join.value == ("e1", 2)


@pytest.mark.parametrize(
    "sources",
    [
        [],
        [SourceSpec("a", "q", lambda c, v: {}), SourceSpec("a", "q2", lambda c, v: {})],
        [SourceSpec("a", "q", lambda c, v: {}, viewer_relative=True)],
    ],
)
def test_invalid_source_lists(transport, sources):
    with pytest.raises(ValueError):
        MultiSourceJoin(transport=transport, sources=sources, compose=dict, context=JoinContext("x"))
