"""Database models package."""

from stylesync.models.user_profile import UserProfile
from stylesync.models.relationship import RelationshipRecord, RelationshipStatus

__all__ = ["UserProfile", "RelationshipRecord", "RelationshipStatus"]
