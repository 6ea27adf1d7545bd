"""Friend endpoints - send/respond/remove requests and list the social graph."""

from typing import Literal

from fastapi import APIRouter, Depends, Query

from stylesync.api.deps import get_current_public_id, get_relationship_service
from stylesync.schemas.relationship import (
    FollowersResponse,
    FollowingResponse,
    FriendListResponse,
    MessageResponse,
    RelationshipRecordOut,
    RequestListResponse,
    RespondRequestIn,
    RespondRequestResponse,
    SendRequestIn,
    SendRequestResponse,
)
from stylesync.services.relationship_service import RelationshipService
from stylesync.services.relationship_store import EdgeRole

router = APIRouter()


@router.post("/requests", response_model=SendRequestResponse, status_code=201)
async def send_friend_request(
    data: SendRequestIn,
    public_id: str = Depends(get_current_public_id),
    service: RelationshipService = Depends(get_relationship_service),
):
    """Send a friend request (private target) or follow (public target)."""
    outcome = await service.send(public_id, data.receiver_username)
    return SendRequestResponse(
        request=RelationshipRecordOut.model_validate(outcome.record),
        message=outcome.message,
    )


@router.get("/requests", response_model=RequestListResponse)
async def list_friend_requests(
    direction: Literal["received", "sent"] = Query("received", alias="type"),
    public_id: str = Depends(get_current_public_id),
    service: RelationshipService = Depends(get_relationship_service),
):
    """List requests received by (default) or sent by the caller."""
    role = EdgeRole.SENDER if direction == "sent" else EdgeRole.RECEIVER
    return RequestListResponse(requests=await service.list_requests(public_id, role))


@router.post("/requests/{request_id}/respond", response_model=RespondRequestResponse)
async def respond_friend_request(
    request_id: str,
    data: RespondRequestIn,
    public_id: str = Depends(get_current_public_id),
    service: RelationshipService = Depends(get_relationship_service),
):
    """Accept or decline a request; on an existing follow, follow back or remove the follower."""
    outcome = await service.respond(public_id, request_id, data.response)
    record = RelationshipRecordOut.model_validate(outcome.record) if outcome.record else None
    return RespondRequestResponse(request=record, message=outcome.message)


@router.get("/", response_model=FriendListResponse)
async def list_friends(
    public_id: str = Depends(get_current_public_id),
    service: RelationshipService = Depends(get_relationship_service),
):
    """Mutual friends of the caller."""
    return FriendListResponse(friends=await service.list_friends(public_id))


@router.get("/followers", response_model=FollowersResponse)
async def list_followers(
    public_id: str = Depends(get_current_public_id),
    service: RelationshipService = Depends(get_relationship_service),
):
    return FollowersResponse(followers=await service.list_followers(public_id))


@router.get("/following", response_model=FollowingResponse)
async def list_following(
    public_id: str = Depends(get_current_public_id),
    service: RelationshipService = Depends(get_relationship_service),
):
    return FollowingResponse(following=await service.list_following(public_id))


@router.delete("/{other_public_id}", response_model=MessageResponse)
async def remove_friend(
    other_public_id: str,
    public_id: str = Depends(get_current_public_id),
    service: RelationshipService = Depends(get_relationship_service),
):
    """Remove one accepted relationship between the caller and another user."""
    outcome = await service.remove(public_id, other_public_id)
    return MessageResponse(message=outcome.message)
