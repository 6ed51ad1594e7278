"""Unit tests for tier classification."""

import pytest

from leaderboard.constants import PlayerTier
from leaderboard.utils.tiers import get_tier_from_elo


@pytest.mark.parametrize("elo, tier", [
    (3000, PlayerTier.CHALLENGER),
    (2400, PlayerTier.CHALLENGER),
    (2399, PlayerTier.GRANDMASTER),
    (2200, PlayerTier.GRANDMASTER),
    (2000, PlayerTier.MASTER),
    (1800, PlayerTier.DIAMOND),
    (1600, PlayerTier.PLATINUM),
    (1400, PlayerTier.GOLD),
    (1200, PlayerTier.SILVER),
    (1199, PlayerTier.BRONZE),
    (1000, PlayerTier.BRONZE),
    (999, PlayerTier.IRON),
    (800, PlayerTier.IRON),
    (799, PlayerTier.WOOD),
    (0, PlayerTier.WOOD),
])
def test_standard_tiers(elo, tier):
    assert get_tier_from_elo(elo, 'standard') == tier


@pytest.mark.parametrize("elo, tier", [
    (2400, PlayerTier.CHALLENGER),
    (1200, PlayerTier.SILVER),
    (1199, PlayerTier.BRONZE),
    (850, PlayerTier.BRONZE),
    (100, PlayerTier.BRONZE),
])
def test_collapsed_tiers_floor_at_bronze(elo, tier):
    assert get_tier_from_elo(elo, 'collapsed') == tier


def test_starting_rating_is_silver():
    assert get_tier_from_elo(1200) == PlayerTier.SILVER


def test_unknown_scheme_is_rejected():
    with pytest.raises(ValueError):
        get_tier_from_elo(1200, 'metal')
