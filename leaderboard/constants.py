"""
Leaderboard-wide constants.

This module contains the rating tier tables and the field groups used
when players are reset, so the thresholds can be swapped without touching
the logic that reads them.
"""

from enum import Enum


class PlayerTier(Enum):
    WOOD = "wood"
    IRON = "iron"
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    DIAMOND = "diamond"
    MASTER = "master"
    GRANDMASTER = "grandmaster"
    CHALLENGER = "challenger"


class MatchType(Enum):
    RANKED = "ranked"
    CASUAL = "casual"
    TOURNAMENT = "tournament"


class TierThresholds:
    """Inclusive lower bounds per tier, highest first."""

    # Ten tiers in 200-point bands with an 800 floor
    STANDARD = (
        (2400, PlayerTier.CHALLENGER),
        (2200, PlayerTier.GRANDMASTER),
        (2000, PlayerTier.MASTER),
        (1800, PlayerTier.DIAMOND),
        (1600, PlayerTier.PLATINUM),
        (1400, PlayerTier.GOLD),
        (1200, PlayerTier.SILVER),
        (1000, PlayerTier.BRONZE),
        (800, PlayerTier.IRON),
    )
    STANDARD_FLOOR = PlayerTier.WOOD

    # Everything below silver is bronze
    COLLAPSED = (
        (2400, PlayerTier.CHALLENGER),
        (2200, PlayerTier.GRANDMASTER),
        (2000, PlayerTier.MASTER),
        (1800, PlayerTier.DIAMOND),
        (1600, PlayerTier.PLATINUM),
        (1400, PlayerTier.GOLD),
        (1200, PlayerTier.SILVER),
    )
    COLLAPSED_FLOOR = PlayerTier.BRONZE


UNKNOWN_DECK = "Unknown"
