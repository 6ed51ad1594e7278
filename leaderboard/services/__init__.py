"""
Services package for the leaderboard.

Services read the whole store and derive state from it; they keep no
caches between calls.
"""

from .player_stats_sync import PlayerStatsSyncService
from .leaderboard import LeaderboardService

__all__ = ['PlayerStatsSyncService', 'LeaderboardService']
