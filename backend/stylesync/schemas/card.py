"""Card-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel

from stylesync.core.card_tables import CardRank, CardSuit


class CardProfile(BaseModel):
    """Derived (rank, suit, friends_count) for one identity, as cached."""
    public_id: str
    rank: CardRank
    suit: CardSuit
    friends_count: int
    computed_at: datetime
    version: int = 1


class RankProgressOut(BaseModel):
    current_rank: CardRank
    next_rank: CardRank | None
    friends_to_next_rank: int
    rank_range_min: int
    rank_range_max: int | None  # null for the top tier
    current_friends_in_range: int


class CardProfileOut(BaseModel):
    rank: CardRank
    suit: CardSuit
    friends_count: int
    username: str
    display_name: str
    avatar_url: str
    bio: str
    interests: list[str]
    next_rank_progress: RankProgressOut


class FriendCardOut(BaseModel):
    user_id: str  # public id
    username: str
    display_name: str
    avatar_url: str | None
    bio: str
    interests: list[str]
    rank: CardRank
    suit: CardSuit
    friends_count: int


class FriendCardsResponse(BaseModel):
    cards: list[FriendCardOut]
