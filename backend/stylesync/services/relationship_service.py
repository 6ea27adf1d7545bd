"""Relationship service - the friend request / follow state machine.

Every mutation runs read-check-write and commits as one unit under the
operation deadline. Card caches of the affected parties are invalidated only
after the commit, and only best-effort.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import assert_never

from sqlalchemy.ext.asyncio import AsyncSession

from stylesync.config import settings
from stylesync.db.database import STORE_ERRORS, STORE_UNAVAILABLE, store_errors_as_unavailable
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
from stylesync.exceptions import InvalidOperation, NotFound, Unavailable
from stylesync.models.relationship import RelationshipRecord, RelationshipStatus
from stylesync.schemas.relationship import (
    FollowEntry,
    FriendEntry,
    ProfileSummary,
    RequestEntry,
)
from stylesync.services.card_profile_service import CardProfileService
from stylesync.services.profile_store import ProfileStore
from stylesync.services.relationship_store import EdgeRole, RelationshipStore

log = logging.getLogger("stylesync.relationships")


@dataclass
class Outcome:
    """Result of one mutation plus the identities whose cards went stale."""
    record: RelationshipRecord | None
    message: str
    stale: list[str] = field(default_factory=list)


class RelationshipService:
    def __init__(
        self,
        db: AsyncSession,
        cards: CardProfileService,
        timeout: float | None = settings.OPERATION_TIMEOUT_SECONDS,
    ):
        self.db = db
        self.store = RelationshipStore(db)
        self.profiles = ProfileStore(db)
        self.cards = cards
        self.timeout = timeout

    async def _run(self, operation: Callable[[], Awaitable[Outcome]]) -> Outcome:
        """Run a mutation and commit it within the deadline, then invalidate."""
        try:
            async with asyncio.timeout(self.timeout):
                outcome = await operation()
                await self.db.commit()
        except TimeoutError:
            await self.db.rollback()
            log.error("Relationship operation exceeded %ss deadline", self.timeout)
            raise Unavailable("Operation timed out, please retry")
        except STORE_ERRORS as exc:
            await self.db.rollback()
            log.error("Store unavailable during relationship operation: %s", exc)
            raise Unavailable(STORE_UNAVAILABLE) from exc

        for public_id in outcome.stale:
            await self.cards.invalidate(public_id)
        return outcome

    # --- mutations ---

    async def send(self, actor_id: str, target_username: str) -> Outcome:
        """Send a request / follow from ``actor_id`` to the user named ``target_username``."""

        async def operation() -> Outcome:
            target = await self.profiles.get_by_username(target_username)
            if target is None:
                raise NotFound("User not found")
            if target.public_id == actor_id:
                raise InvalidOperation("Cannot send friend request to yourself")

            existing = await self.store.find_by_ordered_pair(actor_id, target.public_id)
            intent = resolve_send(existing, target_is_public=target.is_public is True)

            match intent:
                case CreateRequest(status=status):
                    record = await self.store.insert(actor_id, target.public_id, status)
                case ResendRequest(record=declined, status=status):
                    record = await self.store.set_status(declined, status)
                case _ as unreachable:
                    assert_never(unreachable)

            log.info(
                "%s -> %s: request %s (%s)",
                actor_id, target.public_id, record.id, record.status.value,
            )
            stale = [actor_id, target.public_id] if record.status == RelationshipStatus.ACCEPTED else []
            return Outcome(record=record, message="Friend request sent successfully", stale=stale)

        return await self._run(operation)

    async def respond(self, actor_id: str, request_id: str, decision: Decision) -> Outcome:
        """Answer a request addressed to ``actor_id``.

        On a pending request this accepts or declines it. On an accepted
        inbound follow, accept means follow back and decline removes the
        follower.
        """

        async def operation() -> Outcome:
            record = await self.store.get(request_id)
            if record is None:
                raise NotFound("Friend request not found")

            intent = resolve_respond(record, actor_id, decision)
            parties = [record.sender_id, record.receiver_id]

            match intent:
                case AnswerRequest(record=pending, status=status):
                    updated = await self.store.set_status(pending, status)
                    log.info("%s %s request %s", actor_id, status.value, updated.id)
                    stale = parties if status == RelationshipStatus.ACCEPTED else []
                    return Outcome(updated, f"Friend request {status.value} successfully", stale)

                case RemoveFollower(record=follow):
                    await self.store.delete(follow)
                    log.info("%s removed follower %s", actor_id, follow.sender_id)
                    return Outcome(None, "Follower removed successfully", parties)

                case FollowBack(record=follow):
                    return await self._follow_back(actor_id, follow)

                case _ as unreachable:
                    assert_never(unreachable)

        return await self._run(operation)

    async def _follow_back(self, actor_id: str, follow: RelationshipRecord) -> Outcome:
        parties = [follow.sender_id, actor_id]
        reverse = await self.store.find_by_ordered_pair(actor_id, follow.sender_id)

        if reverse is None:
            reverse = await self.store.insert(actor_id, follow.sender_id, RelationshipStatus.ACCEPTED)
        elif reverse.status != RelationshipStatus.ACCEPTED:
            reverse = await self.store.set_status(reverse, RelationshipStatus.ACCEPTED)
        else:
            return Outcome(reverse, "Already following back")

        log.info("%s followed back %s", actor_id, follow.sender_id)
        return Outcome(reverse, "Follow back successful", parties)

    async def remove(self, actor_id: str, other_id: str) -> Outcome:
        """Delete one accepted record between the two parties.

        The actor's own outbound record is removed first; a reverse record is
        left alone until the other side removes it.
        """

        async def operation() -> Outcome:
            if actor_id == other_id:
                raise InvalidOperation("Cannot remove yourself")

            record = await self.store.find_accepted_between(actor_id, other_id)
            if record is None:
                raise NotFound("Friendship not found")

            await self.store.delete(record)
            log.info("%s removed relationship %s with %s", actor_id, record.id, other_id)
            return Outcome(None, "Friend removed successfully", [actor_id, other_id])

        return await self._run(operation)

    # --- listings ---

    async def _summaries(self, public_ids: list[str]) -> dict[str, ProfileSummary]:
        profiles = await self.profiles.get_many(public_ids)
        return {pid: ProfileSummary.model_validate(p) for pid, p in profiles.items()}

    async def _follow_entries(self, actor_id: str, role: EdgeRole) -> list[FollowEntry]:
        with store_errors_as_unavailable():
            records = await self.store.list_accepted(actor_id, role)
            summaries = await self._summaries([r.counterparty(actor_id) for r in records])
        return [
            FollowEntry(
                id=r.id,
                user_id=r.counterparty(actor_id),
                user_profile=summaries.get(r.counterparty(actor_id)),
                followed_at=r.created_at,
            )
            for r in records
        ]

    async def list_followers(self, actor_id: str) -> list[FollowEntry]:
        """People following ``actor_id``, newest first."""
        return await self._follow_entries(actor_id, EdgeRole.RECEIVER)

    async def list_following(self, actor_id: str) -> list[FollowEntry]:
        """People ``actor_id`` follows, newest first."""
        return await self._follow_entries(actor_id, EdgeRole.SENDER)

    async def list_requests(self, actor_id: str, role: EdgeRole) -> list[RequestEntry]:
        with store_errors_as_unavailable():
            records = await self.store.list_requests(actor_id, role)
            summaries = await self._summaries(
                list({r.sender_id for r in records} | {r.receiver_id for r in records})
            )
        return [
            RequestEntry(
                id=r.id,
                sender_id=r.sender_id,
                receiver_id=r.receiver_id,
                status=r.status,
                created_at=r.created_at,
                updated_at=r.updated_at,
                sender_profile=summaries.get(r.sender_id),
                receiver_profile=summaries.get(r.receiver_id),
            )
            for r in records
        ]

    async def list_friends(self, actor_id: str) -> list[FriendEntry]:
        """Mutual friends, sorted by username."""
        with store_errors_as_unavailable():
            friend_ids = await self.store.mutual_counterparties(actor_id)
            summaries = await self._summaries(friend_ids)
        entries = [FriendEntry(user_id=fid, user_profile=summaries.get(fid)) for fid in friend_ids]
        return sorted(
            entries,
            key=lambda e: (e.user_profile.username if e.user_profile else "", e.user_id),
        )
