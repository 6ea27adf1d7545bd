"""Rank classifier - derives a card's rank and suit.

Pure functions over the static card tables: no I/O, no state.
"""

from dataclasses import dataclass

from stylesync.core.card_tables import CardRank, CardSuit, CardTables, card_tables

# Tie-break order when several suits share the highest match count
SUIT_PRIORITY = (CardSuit.HEARTS, CardSuit.DIAMONDS, CardSuit.SPADES, CardSuit.CLUBS)
DEFAULT_SUIT = CardSuit.HEARTS


@dataclass(frozen=True)
class RankProgression:
    current_rank: CardRank
    next_rank: CardRank | None
    friends_to_next_rank: int
    range_min: int
    range_max: int | None  # None for the unbounded top tier


def rank_from_friend_count(friends_count: int, tables: CardTables = card_tables) -> CardRank:
    """Return the tier whose [min, max] range contains ``friends_count``.

    Falls back to the lowest tier for negative counts.
    """
    for tier in tables.ranks:
        if tier.contains(friends_count):
            return tier.rank
    return tables.ranks[0].rank


def suit_from_interests(interests: list[str] | None, tables: CardTables = card_tables) -> CardSuit:
    """Pick the suit whose canonical tags match the most interests.

    Matching is case-insensitive. Ties resolve hearts > diamonds > spades > clubs,
    and no matches at all means hearts.
    """
    counts = dict.fromkeys(SUIT_PRIORITY, 0)
    for suit, canonical in tables.suits.items():
        lowered = {tag.lower() for tag in canonical}
        counts[suit] = sum(1 for tag in interests or [] if tag.lower() in lowered)

    best = max(counts.values())
    if best == 0:
        return DEFAULT_SUIT
    return next(suit for suit in SUIT_PRIORITY if counts[suit] == best)


def rank_progression(rank: CardRank, tables: CardTables = card_tables) -> RankProgression:
    """Progression info for a rank.

    ``friends_to_next_rank`` is the width between this tier's minimum and the
    next tier's minimum, independent of the caller's actual count.
    """
    index = tables.rank_index(rank)
    current = tables.ranks[index]
    next_tier = tables.ranks[index + 1] if index + 1 < len(tables.ranks) else None

    return RankProgression(
        current_rank=rank,
        next_rank=next_tier.rank if next_tier else None,
        friends_to_next_rank=next_tier.min - current.min if next_tier else 0,
        range_min=current.min,
        range_max=current.max,
    )
