"""Tests for transition resolution - which intent a send or respond maps to."""

import pytest

from stylesync.core.transitions import (
    AnswerRequest,
    CreateRequest,
    Decision,
    FollowBack,
    RemoveFollower,
    ResendRequest,
    resolve_respond,
    resolve_send,
)
from stylesync.exceptions import Conflict, Forbidden
from stylesync.models.relationship import RelationshipRecord, RelationshipStatus


def _record(status: RelationshipStatus, sender="alice", receiver="bob") -> RelationshipRecord:
    return RelationshipRecord(id="r1", sender_id=sender, receiver_id=receiver, status=status)


def test_send_new_to_public_target_is_accepted():
    assert resolve_send(None, target_is_public=True) == CreateRequest(RelationshipStatus.ACCEPTED)


def test_send_new_to_private_target_is_pending():
    assert resolve_send(None, target_is_public=False) == CreateRequest(RelationshipStatus.PENDING)


def test_send_over_pending_conflicts():
    with pytest.raises(Conflict, match="already sent"):
        resolve_send(_record(RelationshipStatus.PENDING), target_is_public=False)


def test_send_over_accepted_conflicts():
    with pytest.raises(Conflict, match="already following"):
        resolve_send(_record(RelationshipStatus.ACCEPTED), target_is_public=True)


def test_send_over_declined_resends_in_place():
    declined = _record(RelationshipStatus.DECLINED)
    intent = resolve_send(declined, target_is_public=False)
    assert isinstance(intent, ResendRequest)
    assert intent.record is declined
    assert intent.status == RelationshipStatus.PENDING


def test_respond_by_non_receiver_is_forbidden():
    with pytest.raises(Forbidden):
        resolve_respond(_record(RelationshipStatus.PENDING), "alice", Decision.ACCEPT)


def test_respond_to_declined_conflicts():
    with pytest.raises(Conflict):
        resolve_respond(_record(RelationshipStatus.DECLINED), "bob", Decision.ACCEPT)


@pytest.mark.parametrize("decision", list(Decision))
def test_respond_to_pending_answers(decision):
    intent = resolve_respond(_record(RelationshipStatus.PENDING), "bob", decision)
    assert isinstance(intent, AnswerRequest)
    assert intent.status.value == decision.value


def test_decline_accepted_follow_removes_follower():
    intent = resolve_respond(_record(RelationshipStatus.ACCEPTED), "bob", Decision.DECLINE)
    assert isinstance(intent, RemoveFollower)


def test_accept_accepted_follow_follows_back():
    intent = resolve_respond(_record(RelationshipStatus.ACCEPTED), "bob", Decision.ACCEPT)
    assert isinstance(intent, FollowBack)
