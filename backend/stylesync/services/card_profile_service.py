"""Card profile service - serves rank/suit cards from cache, recomputing on miss."""

import logging

from stylesync.core.rank_classifier import (
    DEFAULT_SUIT,
    rank_from_friend_count,
    rank_progression,
    suit_from_interests,
)
from stylesync.db.database import store_errors_as_unavailable
from stylesync.exceptions import NotFound
from stylesync.models.user_profile import UserProfile
from stylesync.schemas.card import CardProfile, CardProfileOut, FriendCardOut, RankProgressOut
from stylesync.services.card_cache import CardProfileCache
from stylesync.services.profile_store import ProfileStore
from stylesync.services.relationship_store import RelationshipStore

log = logging.getLogger("stylesync.cards")


class CardProfileService:
    def __init__(
        self,
        relationships: RelationshipStore,
        profiles: ProfileStore,
        cache: CardProfileCache,
    ):
        self.relationships = relationships
        self.profiles = profiles
        self.cache = cache

    async def get(self, public_id: str, profile: UserProfile | None = None) -> CardProfile:
        """Return the cached card if fresh, otherwise recompute and store it.

        Concurrent recomputations for one identity are not serialized; they
        produce the same value and the last write wins.
        """
        try:
            cached = await self.cache.get(public_id)
        except Exception:
            log.warning("Card cache read failed for %s, recomputing", public_id, exc_info=True)
            cached = None
        if cached is not None:
            log.debug("Card cache hit for %s", public_id)
            return cached

        if profile is None:
            with store_errors_as_unavailable():
                profile = await self.profiles.get_or_404(public_id)
        return await self.recompute(profile)

    async def recompute(self, profile: UserProfile) -> CardProfile:
        with store_errors_as_unavailable():
            friends_count = await self.relationships.count_accepted(profile.public_id)
        card = CardProfile(
            public_id=profile.public_id,
            rank=rank_from_friend_count(friends_count),
            suit=suit_from_interests(profile.interests or []),
            friends_count=friends_count,
            computed_at=self.cache.clock(),
        )
        log.info(
            "Computed card for %s: rank=%s suit=%s friends=%d",
            profile.public_id, card.rank.value, card.suit.value, friends_count,
        )
        try:
            await self.cache.store(card)
        except Exception:
            log.warning("Card cache write failed for %s", profile.public_id, exc_info=True)
        return card

    async def invalidate(self, public_id: str) -> None:
        """Drop the cached card. Best-effort: failures are logged, never raised."""
        try:
            await self.cache.delete(public_id)
        except Exception:
            log.warning("Card cache invalidation failed for %s", public_id, exc_info=True)
            return
        log.info("Card cache invalidated for %s", public_id)

    async def get_card_profile(self, public_id: str) -> CardProfileOut:
        with store_errors_as_unavailable():
            profile = await self.profiles.get(public_id)
        if profile is None:
            raise NotFound("User profile not found")

        card = await self.get(public_id, profile)
        progression = rank_progression(card.rank)

        return CardProfileOut(
            rank=card.rank,
            suit=card.suit,
            friends_count=card.friends_count,
            username=profile.username or "",
            display_name=profile.display_name or "",
            avatar_url=profile.profile_pic or "",
            bio=profile.bio or "",
            interests=profile.interests or [],
            next_rank_progress=RankProgressOut(
                current_rank=progression.current_rank,
                next_rank=progression.next_rank,
                friends_to_next_rank=progression.friends_to_next_rank,
                rank_range_min=progression.range_min,
                rank_range_max=progression.range_max,
                current_friends_in_range=card.friends_count - progression.range_min,
            ),
        )

    async def list_friend_cards(self, public_id: str) -> list[FriendCardOut]:
        """Cards for every accepted counterparty, sorted by username."""
        with store_errors_as_unavailable():
            counterparty_ids = await self.relationships.accepted_counterparties(public_id)
            profiles = await self.profiles.get_many(counterparty_ids)

        cards = []
        for friend_id in counterparty_ids:
            profile = profiles.get(friend_id)
            if profile is None:
                # Profile gone from the store: show a default card, don't cache it
                log.warning("No profile for counterparty %s of %s", friend_id, public_id)
                cards.append(FriendCardOut(
                    user_id=friend_id,
                    username="",
                    display_name="",
                    avatar_url=None,
                    bio="",
                    interests=[],
                    rank=rank_from_friend_count(0),
                    suit=DEFAULT_SUIT,
                    friends_count=0,
                ))
                continue

            card = await self.get(friend_id, profile)
            cards.append(FriendCardOut(
                user_id=friend_id,
                username=profile.username,
                display_name=profile.display_name or profile.username,
                avatar_url=profile.profile_pic or None,
                bio=profile.bio or "",
                interests=profile.interests or [],
                rank=card.rank,
                suit=card.suit,
                friends_count=card.friends_count,
            ))

        return sorted(cards, key=lambda c: (c.username, c.user_id))
