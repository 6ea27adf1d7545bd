"""Relationship transitions - decides what a send or respond call means.

Both functions are pure: they look at the current record (if any) and return a
transition intent. ``RelationshipService`` carries the intent out against the
store. The meaning of a respond call is decided by the record's current status,
never by a client-supplied flag.
"""

import enum
from dataclasses import dataclass
from typing import assert_never

from stylesync.exceptions import Conflict, Forbidden
from stylesync.models.relationship import RelationshipRecord, RelationshipStatus


class Decision(str, enum.Enum):
    ACCEPT = "accepted"
    DECLINE = "declined"


# --- send intents ---


@dataclass(frozen=True)
class CreateRequest:
    """No record exists for the ordered pair: insert one."""
    status: RelationshipStatus


@dataclass(frozen=True)
class ResendRequest:
    """A declined record is overwritten in place."""
    record: RelationshipRecord
    status: RelationshipStatus


SendIntent = CreateRequest | ResendRequest


# --- respond intents ---


@dataclass(frozen=True)
class AnswerRequest:
    """Pending request: set status to the decision."""
    record: RelationshipRecord
    status: RelationshipStatus


@dataclass(frozen=True)
class RemoveFollower:
    """Accepted inbound follow declined: delete it."""
    record: RelationshipRecord


@dataclass(frozen=True)
class FollowBack:
    """Accepted inbound follow accepted: ensure the reverse record is accepted."""
    record: RelationshipRecord


RespondIntent = AnswerRequest | RemoveFollower | FollowBack


def resolve_send(
    existing: RelationshipRecord | None, target_is_public: bool
) -> SendIntent:
    """Resolve a send from the existing (sender -> target) record.

    The target's visibility decides the resulting status: public targets are
    followed immediately, private ones need approval.
    """
    status = RelationshipStatus.ACCEPTED if target_is_public else RelationshipStatus.PENDING

    if existing is None:
        return CreateRequest(status=status)
    if existing.status == RelationshipStatus.PENDING:
        raise Conflict("Friend request already sent")
    if existing.status == RelationshipStatus.ACCEPTED:
        raise Conflict("You are already following this user")
    return ResendRequest(record=existing, status=status)


def resolve_respond(
    record: RelationshipRecord, actor_id: str, decision: Decision
) -> RespondIntent:
    """Resolve a respond call on ``record`` made by ``actor_id``."""
    if record.receiver_id != actor_id:
        raise Forbidden("You can only respond to requests sent to you")

    match record.status:
        case RelationshipStatus.DECLINED:
            raise Conflict("Friend request already declined")
        case RelationshipStatus.PENDING:
            return AnswerRequest(record=record, status=RelationshipStatus(decision.value))
        case RelationshipStatus.ACCEPTED:
            if decision == Decision.DECLINE:
                return RemoveFollower(record=record)
            return FollowBack(record=record)
        case _ as unreachable:
            assert_never(unreachable)
