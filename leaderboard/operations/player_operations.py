"""
Player Operations Module

Player registration and per-player match history.

Key functionality:
- register_player(): create a player with registration defaults
- get_match_history(): a player's recent matches with summary numbers
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from leaderboard.config import Config
from leaderboard.database.models import Player
from leaderboard.services.player_stats_sync import PlayerStatsSyncService
from leaderboard.utils.elo import EloCalculator
from leaderboard.utils.exceptions import PlayerNotFoundError, PlayerValidationError
from leaderboard.utils.logger import setup_logger

logger = setup_logger(__name__)

MAX_NAME_LENGTH = 100


@dataclass
class MatchHistory:
    """A player's recent matches with their summary"""
    player_id: str
    matches: List[Any] = field(default_factory=list)
    total_matches: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: int = 0
    average_match_duration: float = 0.0

    @property
    def trend(self) -> List[str]:
        """'W'/'L' per match, oldest first"""
        return ['W' if m.winner_id == self.player_id else 'L' for m in reversed(self.matches)]


class PlayerOperations:
    """Business logic operations for Player management."""

    def __init__(self, database):
        """Initialize with database instance"""
        self.db = database
        self.stats_sync = PlayerStatsSyncService(database)
        self.logger = logger

    async def register_player(
        self,
        name: str,
        main_deck: Optional[str] = None,
        user_id: Optional[str] = None,
        avatar: Optional[str] = None,
        decks: Optional[List[Dict[str, Any]]] = None
    ) -> Player:
        """
        Register a new player with default rating and empty record.

        Raises:
            PlayerValidationError: If the name is empty or too long, or the
                account is already linked to a player
        """
        name = (name or '').strip()
        if not name:
            raise PlayerValidationError("Player name is required")
        if len(name) > MAX_NAME_LENGTH:
            raise PlayerValidationError(f"Player name must be at most {MAX_NAME_LENGTH} characters")

        if user_id and await self.db.get_player_by_user_id(user_id):
            raise PlayerValidationError("This account already has a player profile")

        player = await self.db.create_player({
            'name': name,
            'main_deck': (main_deck or '').strip() or None,
            'user_id': user_id,
            'avatar': avatar,
            'decks': decks
        })

        # The newcomer slots in at the starting rating; everyone below moves down
        await self.stats_sync.recalculate_rankings()
        player = await self.db.get_player(player.id)

        self.logger.info(f"Registered player {player.id} ({player.name}) at {player.elo}, rank {player.rank}")
        return player

    async def get_match_history(self, player_id: str, limit: int = Config.RECENT_MATCHES_LIMIT) -> MatchHistory:
        """
        Get a player's most recent matches, newest first.

        Raises:
            PlayerNotFoundError: If the player does not exist
        """
        player = await self.db.get_player(player_id)
        if not player:
            raise PlayerNotFoundError(player_id)

        matches = await self.db.get_player_matches(player_id, limit)
        wins = sum(1 for m in matches if m.winner_id == player_id)
        durations = [m.duration for m in matches if m.duration is not None]

        return MatchHistory(
            player_id=player_id,
            matches=matches,
            total_matches=len(matches),
            wins=wins,
            losses=len(matches) - wins,
            win_rate=EloCalculator.calculate_win_rate(wins, len(matches)),
            average_match_duration=sum(durations) / len(durations) if durations else 0.0
        )
