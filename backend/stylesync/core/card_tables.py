"""Card tables - rank thresholds and suit interest sets, loaded from YAML.

The tables are static: loaded once at import, validated, then shared by the
pure classifier functions in ``rank_classifier``.
"""

import enum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

DATA_FILE = Path(__file__).parent.parent / "data" / "card_tables.yaml"


class CardRank(str, enum.Enum):
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"


class CardSuit(str, enum.Enum):
    SPADES = "spades"
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"


class RankTier(BaseModel):
    """One tier: inclusive friend-count range. ``max`` of None means unbounded."""
    rank: CardRank
    min: int = Field(ge=0)
    max: int | None = None

    def contains(self, friends_count: int) -> bool:
        return friends_count >= self.min and (self.max is None or friends_count <= self.max)


class CardTables(BaseModel):
    ranks: list[RankTier]
    suits: dict[CardSuit, list[str]]

    @model_validator(mode="after")
    def _check_tables(self) -> "CardTables":
        if [tier.rank for tier in self.ranks] != list(CardRank):
            raise ValueError("rank tiers must list all 13 ranks in ascending order")
        if self.ranks[0].min != 0:
            raise ValueError("lowest rank tier must start at 0")
        for prev, cur in zip(self.ranks, self.ranks[1:]):
            if prev.max is None or prev.max < prev.min:
                raise ValueError(f"rank tier {prev.rank.value} has an invalid upper bound")
            if cur.min != prev.max + 1:
                raise ValueError(
                    f"rank tiers {prev.rank.value} and {cur.rank.value} leave a gap or overlap"
                )
        if self.ranks[-1].max is not None:
            raise ValueError("top rank tier must be unbounded")
        if set(self.suits) != set(CardSuit):
            raise ValueError("suit table must define exactly the four suits")
        return self

    def tier(self, rank: CardRank) -> RankTier:
        return self.ranks[self.rank_index(rank)]

    def rank_index(self, rank: CardRank) -> int:
        return list(CardRank).index(rank)


def load_card_tables(path: Path = DATA_FILE) -> CardTables:
    """Load and validate the card tables from a YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Card tables file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    return CardTables(**raw)


card_tables = load_card_tables()
