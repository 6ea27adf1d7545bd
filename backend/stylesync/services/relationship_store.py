"""Relationship store - query layer over the friend_requests table.

All reads go through the request's session, so they see that session's own
writes (read-your-writes).
"""

import enum
import logging

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stylesync.exceptions import Conflict
from stylesync.models.relationship import RelationshipRecord, RelationshipStatus

log = logging.getLogger("stylesync.relationships")


class EdgeRole(str, enum.Enum):
    """Which end of a record an identity sits on."""
    SENDER = "sender"  # outbound: people the identity follows / has asked
    RECEIVER = "receiver"  # inbound: followers / incoming requests


def _involves(public_id: str):
    return or_(
        RelationshipRecord.sender_id == public_id,
        RelationshipRecord.receiver_id == public_id,
    )


def _counterparty_column(public_id: str):
    return case(
        (RelationshipRecord.sender_id == public_id, RelationshipRecord.receiver_id),
        else_=RelationshipRecord.sender_id,
    )


class RelationshipStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    # --- lookups ---

    async def get(self, record_id: str) -> RelationshipRecord | None:
        return await self.db.get(RelationshipRecord, record_id)

    async def find_by_ordered_pair(
        self, sender_id: str, receiver_id: str
    ) -> RelationshipRecord | None:
        result = await self.db.execute(
            select(RelationshipRecord).where(
                RelationshipRecord.sender_id == sender_id,
                RelationshipRecord.receiver_id == receiver_id,
            )
        )
        return result.scalar_one_or_none()

    async def find_accepted_between(self, a: str, b: str) -> RelationshipRecord | None:
        """An accepted record in either direction, preferring a -> b."""
        result = await self.db.execute(
            select(RelationshipRecord)
            .where(
                RelationshipRecord.status == RelationshipStatus.ACCEPTED,
                or_(
                    and_(RelationshipRecord.sender_id == a, RelationshipRecord.receiver_id == b),
                    and_(RelationshipRecord.sender_id == b, RelationshipRecord.receiver_id == a),
                ),
            )
            .order_by(case((RelationshipRecord.sender_id == a, 0), else_=1))
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def count_accepted(self, public_id: str) -> int:
        """Friend count: distinct counterparties joined by an accepted record.

        A mutual pair (two accepted records) counts once.
        """
        result = await self.db.execute(
            select(func.count(func.distinct(_counterparty_column(public_id)))).where(
                RelationshipRecord.status == RelationshipStatus.ACCEPTED,
                _involves(public_id),
            )
        )
        return result.scalar_one()

    async def list_accepted(
        self, public_id: str, role: EdgeRole
    ) -> list[RelationshipRecord]:
        """Accepted records with ``public_id`` on the given end, newest first."""
        column = (
            RelationshipRecord.sender_id if role == EdgeRole.SENDER else RelationshipRecord.receiver_id
        )
        result = await self.db.execute(
            select(RelationshipRecord)
            .where(column == public_id, RelationshipRecord.status == RelationshipStatus.ACCEPTED)
            .order_by(RelationshipRecord.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_requests(
        self, public_id: str, role: EdgeRole
    ) -> list[RelationshipRecord]:
        """Every record (any status) with ``public_id`` on the given end, newest first."""
        column = (
            RelationshipRecord.sender_id if role == EdgeRole.SENDER else RelationshipRecord.receiver_id
        )
        result = await self.db.execute(
            select(RelationshipRecord)
            .where(column == public_id)
            .order_by(RelationshipRecord.created_at.desc())
        )
        return list(result.scalars().all())

    async def accepted_counterparties(self, public_id: str) -> list[str]:
        """Distinct public ids joined to ``public_id`` by an accepted record."""
        result = await self.db.execute(
            select(_counterparty_column(public_id))
            .where(RelationshipRecord.status == RelationshipStatus.ACCEPTED, _involves(public_id))
            .distinct()
        )
        return list(result.scalars().all())

    async def mutual_counterparties(self, public_id: str) -> list[str]:
        """Public ids with accepted records in both directions."""
        following = {r.receiver_id for r in await self.list_accepted(public_id, EdgeRole.SENDER)}
        followers = {r.sender_id for r in await self.list_accepted(public_id, EdgeRole.RECEIVER)}
        return sorted(following & followers)

    # --- writes ---

    async def insert(
        self, sender_id: str, receiver_id: str, status: RelationshipStatus
    ) -> RelationshipRecord:
        """Insert a new record; losing a race on the pair surfaces as Conflict."""
        record = RelationshipRecord(sender_id=sender_id, receiver_id=receiver_id, status=status)
        self.db.add(record)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            log.info("Duplicate relationship %s -> %s rejected by constraint", sender_id, receiver_id)
            raise Conflict("Friend request already exists")
        await self.db.refresh(record)
        return record

    async def set_status(
        self, record: RelationshipRecord, status: RelationshipStatus
    ) -> RelationshipRecord:
        record.status = status
        record.updated_at = func.now()
        await self.db.flush()
        await self.db.refresh(record)
        return record

    async def delete(self, record: RelationshipRecord) -> None:
        await self.db.delete(record)
        await self.db.flush()
