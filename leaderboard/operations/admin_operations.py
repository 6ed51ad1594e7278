"""
Administrative Operations Module

Bulk season operations over the whole player set.

Key functionality:
- reset_all_players_to_default(): reset ratings and records, saving each
  player's standing into the season carry-over fields first
- start_new_season(): the same reset under the new-season entry point

A reset never loses a player's prior standing: the pre-reset elo, peak
and rank are written to last_season_elo / last_season_peak_elo /
last_season_rank in the same update that clears the live fields.
"""

from typing import Any, Dict

from leaderboard.config import Config
from leaderboard.services.player_stats_sync import PlayerStatsSyncService
from leaderboard.utils.exceptions import BulkOperationError
from leaderboard.utils.logger import setup_logger
from leaderboard.utils.ranking import RankingUtility
from leaderboard.utils.tiers import get_tier_from_elo

logger = setup_logger(__name__)


def build_reset_updates(player, current_rank: int) -> Dict[str, Any]:
    """Field updates that reset one player, carrying their standing over."""
    return {
        'last_season_elo': player.elo,
        'last_season_peak_elo': player.peak_elo if player.peak_elo is not None else player.elo,
        'last_season_rank': current_rank,
        'elo': Config.STARTING_ELO,
        'tier': get_tier_from_elo(Config.STARTING_ELO),
        'peak_elo': Config.STARTING_ELO,
        'wins': 0,
        'losses': 0,
        'total_matches': 0,
        'win_rate': 0,
        'streak': 0,
        'recent_matches': []
    }


class AdminOperations:
    """Business logic for administrative season management."""

    def __init__(self, database):
        """Initialize with database instance"""
        self.db = database
        self.stats_sync = PlayerStatsSyncService(database)
        self.logger = logger

    async def reset_all_players_to_default(self) -> Dict[str, Any]:
        """
        Reset every player to starting values, saving their standing first.

        The carried-over rank is the player's rank in the live player set
        immediately before the reset. Per-player failures are collected;
        ranks are reassigned once all updates have been attempted, and
        failed rank writes join the same report.

        Returns:
            Dictionary with the number of players reset

        Raises:
            BulkOperationError: If one or more player updates failed
        """
        players = await self.db.list_players()
        current_ranks = RankingUtility.assign_ranks(players)

        reset_count = 0
        failures: Dict[str, str] = {}
        for player in players:
            try:
                await self.db.update_player(player.id, build_reset_updates(player, current_ranks[player.id]))
                reset_count += 1
            except Exception as e:
                self.logger.error(f"Failed to reset player {player.id}: {e}")
                failures[player.id] = str(e)

        _, rank_failures = await self.stats_sync.write_rankings()
        for player_id, message in rank_failures.items():
            failures.setdefault(player_id, message)

        self.logger.info(f"Reset {reset_count} of {len(players)} players to {Config.STARTING_ELO}")
        if failures:
            raise BulkOperationError("Player reset", failures, reset_count)

        return {'players_reset': reset_count}

    async def start_new_season(self) -> Dict[str, Any]:
        """Start a new season: identical to resetting all players to default."""
        self.logger.info("Starting new season")
        return await self.reset_all_players_to_default()
