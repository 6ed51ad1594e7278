"""
Player Stats Synchronization Service

Recomputes every player's derived statistics from the authoritative match
log and writes them back, overriding whatever drift the stored counters
have picked up. Rating fields (elo, peak_elo) are never touched here; they
are only changed by match recording and the season reset operations.

Key functionality:
- calculate_player_stats(): pure per-player recompute from a match list
- sync_player_stats(): full reconciliation pass over the store
- recalculate_rankings(): rank-only pass
- find_out_of_sync_players(): report stored values that differ from the log
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Tuple

from leaderboard.config import Config
from leaderboard.utils.elo import EloCalculator
from leaderboard.utils.exceptions import BulkOperationError
from leaderboard.utils.logger import setup_logger
from leaderboard.utils.ranking import RankingUtility

logger = setup_logger(__name__)


@dataclass
class PlayerStats:
    """Derived statistics for one player"""
    wins: int = 0
    losses: int = 0
    total_matches: int = 0
    win_rate: int = 0
    streak: int = 0
    recent_matches: List[str] = field(default_factory=list)

    def as_updates(self) -> Dict[str, Any]:
        return asdict(self)


def _recency_key(match) -> tuple:
    # Matches sharing a date are ordered by insertion time
    return (match.date or datetime.min, match.created_at or datetime.min)


def calculate_streak(player_id: str, matches: Iterable[Any]) -> int:
    """
    Signed length of the unbroken run of same results ending at the most
    recent match. Positive for wins, negative for losses, 0 with no matches.
    """
    streak = 0
    last_result = None

    for match in sorted(matches, key=_recency_key, reverse=True):
        is_win = match.winner_id == player_id
        if last_result is None:
            last_result = is_win
            streak = 1 if is_win else -1
        elif is_win == last_result:
            streak = streak + 1 if is_win else streak - 1
        else:
            break

    return streak


def calculate_player_stats(player_id: str, matches: Iterable[Any]) -> PlayerStats:
    """Recompute one player's derived stats from the full match list."""
    player_matches = [m for m in matches if m.involves(player_id)]

    wins = sum(1 for m in player_matches if m.winner_id == player_id)
    losses = len(player_matches) - wins
    total_matches = wins + losses

    newest_first = sorted(player_matches, key=_recency_key, reverse=True)

    return PlayerStats(
        wins=wins,
        losses=losses,
        total_matches=total_matches,
        win_rate=EloCalculator.calculate_win_rate(wins, total_matches),
        streak=calculate_streak(player_id, player_matches),
        recent_matches=[m.id for m in newest_first[:Config.RECENT_MATCHES_LIMIT]]
    )


def calculate_all_player_stats(players: Iterable[Any], matches: Iterable[Any]) -> Dict[str, PlayerStats]:
    """
    Recompute derived stats for every player.

    Matches naming a player id that is not in `players` contribute nothing
    to that id.
    """
    matches_by_player: Dict[str, List[Any]] = {}
    player_ids = [player.id for player in players]
    for player_id in player_ids:
        matches_by_player[player_id] = []

    for match in matches:
        for participant in (match.player1_id, match.player2_id):
            if participant in matches_by_player:
                matches_by_player[participant].append(match)
            else:
                logger.debug(f"Match {match.id} references missing player {participant}, skipping")

    return {
        player_id: calculate_player_stats(player_id, matches_by_player[player_id])
        for player_id in player_ids
    }


class PlayerStatsSyncService:
    """Service for reconciling player statistics with the match history."""

    def __init__(self, database):
        """Initialize with database instance"""
        self.db = database
        self.logger = logger

    async def write_rankings(self) -> Tuple[int, Dict[str, str]]:
        """
        Write every changed rank, continuing past failed writes.

        Returns:
            (players moved, {player_id: error message} for failed writes)
        """
        players = await self.db.list_players()
        changed = RankingUtility.changed_ranks(players)

        moved = 0
        failures: Dict[str, str] = {}
        for player_id, rank in changed.items():
            try:
                await self.db.update_player(player_id, {'rank': rank})
                moved += 1
            except Exception as e:
                self.logger.error(f"Failed to write rank {rank} for player {player_id}: {e}")
                failures[player_id] = str(e)

        self.logger.info(f"Rankings recalculated: {moved} of {len(players)} players moved")
        return moved, failures

    async def recalculate_rankings(self) -> int:
        """
        Reassign every player's rank from the current ratings.

        Returns:
            Number of players whose rank changed

        Raises:
            BulkOperationError: If one or more rank writes failed
        """
        moved, failures = await self.write_rankings()
        if failures:
            raise BulkOperationError("Rank recalculation", failures, moved)
        return moved

    async def sync_player_stats(self) -> int:
        """
        Replay the whole match log and overwrite every player's derived stats.

        Each player's update is independent; a failed update is recorded and
        the pass continues. Ranks are reassigned once all writes are done,
        and failed rank writes are reported with the stats failures.

        Returns:
            Number of players updated

        Raises:
            BulkOperationError: If one or more player updates failed
        """
        players = await self.db.list_players()
        matches = await self.db.list_matches()

        all_stats = calculate_all_player_stats(players, matches)

        updated = 0
        failures: Dict[str, str] = {}
        for player_id, stats in all_stats.items():
            try:
                await self.db.update_player(player_id, stats.as_updates())
                updated += 1
            except Exception as e:
                self.logger.error(f"Failed to sync stats for player {player_id}: {e}")
                failures[player_id] = str(e)

        _, rank_failures = await self.write_rankings()
        for player_id, message in rank_failures.items():
            failures.setdefault(player_id, message)

        self.logger.info(f"Synced stats for {updated} players from {len(matches)} matches")
        if failures:
            raise BulkOperationError("Stats sync", failures, updated)
        return updated

    async def find_out_of_sync_players(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """
        Compare stored player stats against the match log without writing.

        Returns:
            {player_id: {field: {'stored': value, 'expected': value}}} for
            every player with at least one differing field
        """
        players = await self.db.list_players()
        matches = await self.db.list_matches()

        all_stats = calculate_all_player_stats(players, matches)
        expected_ranks = RankingUtility.assign_ranks(players)

        report = {}
        for player in players:
            expected = all_stats[player.id].as_updates()
            expected['rank'] = expected_ranks[player.id]

            differences = {}
            for field_name, expected_value in expected.items():
                stored_value = getattr(player, field_name)
                if field_name == 'recent_matches':
                    stored_value = list(stored_value or [])
                if stored_value != expected_value:
                    differences[field_name] = {'stored': stored_value, 'expected': expected_value}

            if differences:
                report[player.id] = differences

        self.logger.info(f"Sync check: {len(report)} of {len(players)} players out of sync")
        return report
