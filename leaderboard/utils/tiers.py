from typing import Optional, Sequence, Tuple

from leaderboard.config import Config
from leaderboard.constants import PlayerTier, TierThresholds


def get_tier_table(scheme: Optional[str] = None) -> Tuple[Sequence[Tuple[int, PlayerTier]], PlayerTier]:
    """Get (thresholds, floor tier) for a tier scheme name"""
    scheme = (scheme or Config.TIER_SCHEME).lower()
    if scheme == 'collapsed':
        return TierThresholds.COLLAPSED, TierThresholds.COLLAPSED_FLOOR
    if scheme == 'standard':
        return TierThresholds.STANDARD, TierThresholds.STANDARD_FLOOR
    raise ValueError(f"Unknown tier scheme: {scheme}")


def get_tier_from_elo(elo: int, scheme: Optional[str] = None) -> PlayerTier:
    """Get the tier for a rating; thresholds are inclusive lower bounds."""
    thresholds, floor = get_tier_table(scheme)
    for minimum, tier in thresholds:
        if elo >= minimum:
            return tier
    return floor
