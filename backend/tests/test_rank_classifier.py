"""Tests for the rank classifier and the card tables it reads."""

import pytest
from pydantic import ValidationError

from stylesync.core.card_tables import CardRank, CardSuit, CardTables, card_tables
from stylesync.core.rank_classifier import (
    rank_from_friend_count,
    rank_progression,
    suit_from_interests,
)


def _tables_with(ranks):
    return CardTables(ranks=ranks, suits={s.value: [] for s in CardSuit})


def test_rank_boundaries():
    assert rank_from_friend_count(0) == CardRank.TWO
    assert rank_from_friend_count(2) == CardRank.TWO
    assert rank_from_friend_count(3) == CardRank.THREE
    assert rank_from_friend_count(9) == CardRank.FOUR
    assert rank_from_friend_count(10) == CardRank.FIVE
    assert rank_from_friend_count(50) == CardRank.TEN
    assert rank_from_friend_count(99) == CardRank.JACK
    assert rank_from_friend_count(100) == CardRank.QUEEN
    assert rank_from_friend_count(249) == CardRank.KING
    assert rank_from_friend_count(250) == CardRank.ACE
    assert rank_from_friend_count(1_000_000) == CardRank.ACE


def test_negative_count_falls_back_to_lowest_rank():
    assert rank_from_friend_count(-1) == CardRank.TWO
    assert rank_from_friend_count(-500) == CardRank.TWO


def test_rank_is_monotonic():
    order = list(CardRank)
    previous = 0
    for n in range(0, 400):
        index = order.index(rank_from_friend_count(n))
        assert index >= previous
        previous = index


def test_thresholds_partition_without_gaps():
    tiers = card_tables.ranks
    assert len(tiers) == 13
    assert tiers[0].min == 0
    for prev, cur in zip(tiers, tiers[1:]):
        assert cur.min == prev.max + 1
    assert tiers[-1].max is None


def test_tables_reject_gap():
    ranks = [tier.model_dump() for tier in card_tables.ranks]
    ranks[3]["min"] += 1
    with pytest.raises(ValidationError):
        _tables_with(ranks)


def test_tables_reject_bounded_top_tier():
    ranks = [tier.model_dump() for tier in card_tables.ranks]
    ranks[-1]["max"] = 999
    with pytest.raises(ValidationError):
        _tables_with(ranks)


def test_tables_reject_missing_rank():
    ranks = [tier.model_dump() for tier in card_tables.ranks][:-1]
    with pytest.raises(ValidationError):
        _tables_with(ranks)


def test_suit_single_match():
    assert suit_from_interests(["Streetwear"]) == CardSuit.SPADES
    assert suit_from_interests(["Vintage", "Thrift"]) == CardSuit.CLUBS
    assert suit_from_interests(["Luxury"]) == CardSuit.DIAMONDS


def test_suit_is_case_insensitive():
    assert suit_from_interests(["sNeAkErS", "URBAN"]) == CardSuit.SPADES


def test_suit_strict_maximum_wins():
    assert suit_from_interests(["Vintage", "Retro", "Luxury"]) == CardSuit.CLUBS


def test_suit_tie_breaks():
    # hearts:1, diamonds:1
    assert suit_from_interests(["Comfort", "Luxury"]) == CardSuit.HEARTS
    # diamonds:1, spades:1, clubs:1
    assert suit_from_interests(["Luxury", "Urban", "Retro"]) == CardSuit.DIAMONDS
    # spades:1, clubs:1
    assert suit_from_interests(["Urban", "Retro"]) == CardSuit.SPADES


def test_suit_defaults_to_hearts():
    assert suit_from_interests([]) == CardSuit.HEARTS
    assert suit_from_interests(None) == CardSuit.HEARTS
    assert suit_from_interests(["Gardening", "Chess"]) == CardSuit.HEARTS


def test_progression_uses_tier_width():
    progression = rank_progression(CardRank.FIVE)
    assert progression.next_rank == CardRank.SIX
    # next.min (15) - current.min (10), independent of any caller count
    assert progression.friends_to_next_rank == 5
    assert progression.range_min == 10
    assert progression.range_max == 14


def test_progression_top_tier():
    progression = rank_progression(CardRank.ACE)
    assert progression.next_rank is None
    assert progression.friends_to_next_rank == 0
    assert progression.range_min == 250
    assert progression.range_max is None


def test_progression_lowest_tier():
    progression = rank_progression(CardRank.TWO)
    assert progression.next_rank == CardRank.THREE
    assert progression.friends_to_next_rank == 3
