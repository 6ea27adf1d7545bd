"""Profile store - read access to user profiles (username, interests, visibility)."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stylesync.exceptions import NotFound
from stylesync.models.user_profile import UserProfile


def normalize_username(username: str) -> str:
    return username.strip().lower()


class ProfileStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, public_id: str) -> UserProfile | None:
        result = await self.db.execute(
            select(UserProfile).where(UserProfile.public_id == public_id)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, public_id: str) -> UserProfile:
        profile = await self.get(public_id)
        if profile is None:
            raise NotFound("User not found")
        return profile

    async def get_by_username(self, username: str) -> UserProfile | None:
        result = await self.db.execute(
            select(UserProfile).where(UserProfile.username == normalize_username(username))
        )
        return result.scalar_one_or_none()

    async def get_many(self, public_ids: list[str]) -> dict[str, UserProfile]:
        """Profiles keyed by public id; unknown ids are simply absent."""
        if not public_ids:
            return {}
        result = await self.db.execute(
            select(UserProfile).where(UserProfile.public_id.in_(public_ids))
        )
        return {p.public_id: p for p in result.scalars().all()}
