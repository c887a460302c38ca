"""Join definitions for the composite views.

Query names match the remote store's read API.
"""

from collections.abc import Mapping
from typing import Any

from swr_cache.dto import CompositePost, CompositeProfile, UserSummary
from swr_cache.protocols import ReactiveSource

from .join import JoinContext, MultiSourceJoin, SourceSpec

GET_USER_BY_USERNAME = "getUserByUsername"
GET_FOLLOWER_COUNT = "getFollowerCount"
GET_FOLLOWING_COUNT = "getFollowingCount"
IS_FOLLOWING = "isFollowing"
GET_POST = "getPost"


def _user_id(values: Mapping[str, Any]) -> str | None:
    user = values.get("user")
    if not user:
        return None
    return user.get("id") or user.get("_id")


def _by_username(ctx: JoinContext, _: Mapping[str, Any]) -> dict[str, Any]:
    return {"username": ctx.root_id}


def _by_user_id(_: JoinContext, values: Mapping[str, Any]) -> dict[str, Any] | None:
    user_id = _user_id(values)
    return {"user_id": user_id} if user_id else None


def _follow_edge(ctx: JoinContext, values: Mapping[str, Any]) -> dict[str, Any] | None:
    user_id = _user_id(values)
    if not user_id or ctx.viewer_id is None:
        return None
    return {"follower_id": ctx.viewer_id, "following_id": user_id}


PROFILE_SOURCES = (
    SourceSpec("user", GET_USER_BY_USERNAME, _by_username),
    SourceSpec("follower_count", GET_FOLLOWER_COUNT, _by_user_id, default=0),
    SourceSpec("following_count", GET_FOLLOWING_COUNT, _by_user_id, default=0),
    SourceSpec("is_following", IS_FOLLOWING, _follow_edge, viewer_relative=True, default=False),
)


def compose_profile(values: Mapping[str, Any]) -> CompositeProfile:
    return CompositeProfile(
        user=UserSummary.model_validate(values["user"]),
        follower_count=values["follower_count"],
        following_count=values["following_count"],
        is_following=bool(values["is_following"]),
    )


def profile_join(
    transport: ReactiveSource,
    username: str,
    viewer_id: str | None,
) -> MultiSourceJoin[CompositeProfile]:
    """Join the user lookup with follower/following counts and the follow flag."""
    return MultiSourceJoin(
        transport=transport,
        sources=PROFILE_SOURCES,
        compose=compose_profile,
        context=JoinContext(root_id=username, viewer_id=viewer_id),
    )


def _post_args(ctx: JoinContext, _: Mapping[str, Any]) -> dict[str, Any]:
    # The post query personalizes likes and votes, so the viewer is an argument.
    args: dict[str, Any] = {"post_id": ctx.root_id}
    if ctx.viewer_id is not None:
        args["user_id"] = ctx.viewer_id
    return args


POST_SOURCES = (SourceSpec("post", GET_POST, _post_args),)


def compose_post(values: Mapping[str, Any]) -> CompositePost:
    return CompositePost(post=dict(values["post"]))


def post_join(
    transport: ReactiveSource,
    post_id: str,
    viewer_id: str | None,
) -> MultiSourceJoin[CompositePost]:
    """Single-source join for one post as seen by the viewer."""
    return MultiSourceJoin(
        transport=transport,
        sources=POST_SOURCES,
        compose=compose_post,
        context=JoinContext(root_id=post_id, viewer_id=viewer_id),
    )
