"""Relationship record model - one directed edge of the social graph."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Enum, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from stylesync.db.database import Base


class RelationshipStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class RelationshipRecord(Base):
    """A friend request / follow from sender to receiver.

    A mutual friendship is two accepted records, one per direction.
    A one-way follow is a single accepted record.
    """
    __tablename__ = "friend_requests"
    __table_args__ = (
        UniqueConstraint("sender_id", "receiver_id", name="uq_friend_requests_pair"),
        CheckConstraint("sender_id <> receiver_id", name="ck_friend_requests_distinct"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    # Public ids, referenced by value
    sender_id: Mapped[str] = mapped_column(String(64), index=True)
    receiver_id: Mapped[str] = mapped_column(String(64), index=True)
    status: Mapped[RelationshipStatus] = mapped_column(
        Enum(
            RelationshipStatus,
            name="friend_request_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        default=RelationshipStatus.PENDING,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def counterparty(self, public_id: str) -> str:
        """The other party of this record, seen from ``public_id``."""
        return self.receiver_id if self.sender_id == public_id else self.sender_id
