"""Raw source events — the typed variants the live-stream client emits.

Each variant carries a literal ``type`` tag so that decoded JSON can be
validated into the right model (``RawSourceEvent`` is a discriminated
union).  Only the fields the pipeline needs are modelled.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ChatMessage(BaseModel):
    """A viewer comment.  ``timestamp`` is the source's unix time."""

    model_config = ConfigDict(frozen=True)

    type: Literal["chat"] = "chat"
    nickname: str
    text: str
    timestamp: int


class GiftMessage(BaseModel):
    """A gift sent by a viewer, possibly repeated (combo)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["gift"] = "gift"
    nickname: str
    gift_name: str
    repeat_count: int = 1
    timestamp: int


class LikeMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["like"] = "like"
    nickname: str
    like_count: int


class UserAction(BaseModel):
    """A user action such as ``follow``, ``share`` or ``join``."""

    model_config = ConfigDict(frozen=True)

    type: Literal["user_action"] = "user_action"
    nickname: str
    action: str  # "follow", "share", anything else is ignored downstream


class ViewerCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["viewers"] = "viewers"
    viewers: int


RawSourceEvent = Annotated[
    Union[ChatMessage, GiftMessage, LikeMessage, UserAction, ViewerCount],
    Field(discriminator="type"),
]

# Validates a decoded JSON object into the matching variant.
RAW_EVENT_ADAPTER: TypeAdapter[RawSourceEvent] = TypeAdapter(RawSourceEvent)

# The action values that map onto canonical kinds.
USER_ACTION_FOLLOW = "follow"
USER_ACTION_SHARE = "share"
