"""Composite value objects assembled by multi-source joins.

A composite is only built once every contributing source has resolved, so
its fields are never partially populated.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class UserSummary(BaseModel):
    """Core user fields as returned by the user lookup."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., validation_alias=AliasChoices("id", "_id"), description="User id")
    name: str = Field(..., description="Display name")
    username: str | None = Field(None, description="Handle")
    image: str | None = Field(None, description="Avatar URL")
    header_image: str | None = Field(None, validation_alias=AliasChoices("header_image", "headerImage"))
    uni_name: str | None = Field(None, description="University name")
    major: str | None = Field(None, description="Field of study")
    bio: str | None = Field(None, description="Profile bio")


class CompositeProfile(BaseModel):
    """A user profile joined with relationship counts and viewer flags."""

    model_config = ConfigDict(frozen=True)

    user: UserSummary
    follower_count: int = Field(..., ge=0)
    following_count: int = Field(..., ge=0)
    is_following: bool = Field(False, description="False for anonymous viewers")


class CompositePost(BaseModel):
    """A post as seen by one viewer (likes and poll votes are viewer-relative)."""

    model_config = ConfigDict(frozen=True)

    post: dict[str, Any]

    @property
    def post_id(self) -> str | None:
        return self.post.get("id") or self.post.get("_id")
