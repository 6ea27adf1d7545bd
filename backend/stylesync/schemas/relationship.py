"""Relationship-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from stylesync.core.transitions import Decision
from stylesync.models.relationship import RelationshipStatus


class ProfileSummary(BaseModel):
    public_id: str
    username: str
    display_name: str | None
    profile_pic: str | None

    model_config = {"from_attributes": True}


class RelationshipRecordOut(BaseModel):
    id: str
    sender_id: str
    receiver_id: str
    status: RelationshipStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SendRequestIn(BaseModel):
    receiver_username: str = Field(min_length=1, max_length=50)

    @field_validator("receiver_username")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("receiver_username cannot be empty")
        return value


class SendRequestResponse(BaseModel):
    request: RelationshipRecordOut
    message: str


class RespondRequestIn(BaseModel):
    response: Decision


class RespondRequestResponse(BaseModel):
    request: RelationshipRecordOut | None  # None when a follower was removed
    message: str


class MessageResponse(BaseModel):
    message: str


class RequestEntry(RelationshipRecordOut):
    sender_profile: ProfileSummary | None = None
    receiver_profile: ProfileSummary | None = None


class RequestListResponse(BaseModel):
    requests: list[RequestEntry]


class FollowEntry(BaseModel):
    id: str  # relationship record id
    user_id: str  # counterparty public id
    user_profile: ProfileSummary | None
    followed_at: datetime


class FollowersResponse(BaseModel):
    followers: list[FollowEntry]


class FollowingResponse(BaseModel):
    following: list[FollowEntry]


class FriendEntry(BaseModel):
    user_id: str
    user_profile: ProfileSummary | None


class FriendListResponse(BaseModel):
    friends: list[FriendEntry]
