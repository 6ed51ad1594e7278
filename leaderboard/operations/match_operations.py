"""
Match Operations Module

Records completed matches: validates the submission, computes the rating
update, stores the match with its rating audit, updates both players and
reassigns ranks.

Key functionality:
- record_match(): the complete match recording workflow
- validate_match_submission(): caller-side checks, run before any I/O

Recording is not idempotent: every call stores a new match.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from leaderboard.config import Config
from leaderboard.constants import MatchType
from leaderboard.database.models import utc_now
from leaderboard.services.player_stats_sync import PlayerStatsSyncService
from leaderboard.utils.elo import EloCalculator
from leaderboard.utils.exceptions import MatchValidationError, PlayerNotFoundError
from leaderboard.utils.logger import setup_logger
from leaderboard.utils.tiers import get_tier_from_elo

logger = setup_logger(__name__)


@dataclass
class MatchOutcome:
    """Result of recording one match"""
    match_id: str
    winner_id: str
    loser_id: str
    winner_old_elo: int
    winner_new_elo: int
    loser_old_elo: int
    loser_new_elo: int
    elo_change: int
    dominant_win_bonus: int
    streak_bonus: int
    k_factor: int

    @property
    def loser_elo_change(self) -> int:
        return self.loser_new_elo - self.loser_old_elo


def validate_match_submission(player1_id: str, player2_id: str, winner_id: str,
                              winner_score: int, loser_score: int) -> None:
    """
    Reject malformed submissions.

    Raises:
        MatchValidationError: If the players are missing or identical, the
            winner is not one of them, or the score pair is not a valid result
    """
    if not player1_id or not player2_id or not winner_id:
        raise MatchValidationError("Both players and a winner are required")
    if player1_id == player2_id:
        raise MatchValidationError("Player 1 and Player 2 must be different")
    if winner_id not in (player1_id, player2_id):
        raise MatchValidationError("Winner must be either Player 1 or Player 2")

    for label, score in (("Winner score", winner_score), ("Loser score", loser_score)):
        if isinstance(score, bool) or not isinstance(score, int):
            raise MatchValidationError(f"{label} must be a whole number")
        if score < 0:
            raise MatchValidationError(f"{label} cannot be negative")
    if winner_score < loser_score:
        raise MatchValidationError("Winner score cannot be lower than loser score")


def next_win_streak(streak: int) -> int:
    return streak + 1 if streak >= 0 else 1


def next_loss_streak(streak: int) -> int:
    return streak - 1 if streak <= 0 else -1


class MatchOperations:
    """Business logic for recording match results."""

    def __init__(self, database):
        """Initialize with database instance"""
        self.db = database
        self.stats_sync = PlayerStatsSyncService(database)
        self.logger = logger

    async def record_match(
        self,
        player1_id: str,
        player2_id: str,
        winner_id: str,
        winner_score: int,
        loser_score: int,
        match_type: MatchType = MatchType.RANKED,
        date: Optional[datetime] = None,
        duration: int = Config.DEFAULT_MATCH_DURATION
    ) -> MatchOutcome:
        """
        Record a completed match and apply its rating update.

        Args:
            player1_id: First participant
            player2_id: Second participant
            winner_id: Must be player1_id or player2_id
            winner_score: Games won by the winner
            loser_score: Games won by the loser
            match_type: Ranked, casual or tournament (all are rated)
            date: When the match was played, defaults to now
            duration: Match length in minutes

        Returns:
            MatchOutcome with the rating audit

        Raises:
            MatchValidationError: If the submission is invalid (nothing is written)
            PlayerNotFoundError: If a participant does not exist (nothing is written)
            BulkOperationError: If the match was stored but some ranks could not be written
        """
        validate_match_submission(player1_id, player2_id, winner_id, winner_score, loser_score)

        player1 = await self.db.get_player(player1_id)
        if not player1:
            raise PlayerNotFoundError(player1_id)
        player2 = await self.db.get_player(player2_id)
        if not player2:
            raise PlayerNotFoundError(player2_id)

        winner, loser = (player1, player2) if winner_id == player1_id else (player2, player1)

        k_factor = EloCalculator.get_match_k_factor(
            winner.elo, winner.total_matches or 0,
            loser.elo, loser.total_matches or 0
        )
        result = EloCalculator.calculate_elo(
            winner.elo,
            loser.elo,
            k_factor,
            winner_score,
            loser_score,
            winner.streak or 0
        )

        match_id = await self.db.create_match(self._build_match_record(
            player1, player2, winner_id, winner_score, loser_score,
            winner.elo, loser.elo, result, match_type, date or utc_now(), duration
        ))

        await self.db.update_player(winner.id, self._winner_updates(winner, result.new_winner_elo, match_id))
        await self.db.update_player(loser.id, self._loser_updates(loser, result.new_loser_elo, match_id))

        await self.stats_sync.recalculate_rankings()

        self.logger.info(
            f"Recorded match {match_id}: {winner.name} beat {loser.name} "
            f"{winner_score}-{loser_score} "
            f"({winner.elo}->{result.new_winner_elo} {EloCalculator.format_elo_change(result.elo_change)}, "
            f"{loser.elo}->{result.new_loser_elo}, K={k_factor})"
        )

        return MatchOutcome(
            match_id=match_id,
            winner_id=winner.id,
            loser_id=loser.id,
            winner_old_elo=winner.elo,
            winner_new_elo=result.new_winner_elo,
            loser_old_elo=loser.elo,
            loser_new_elo=result.new_loser_elo,
            elo_change=result.elo_change,
            dominant_win_bonus=result.dominant_win_bonus,
            streak_bonus=result.streak_bonus,
            k_factor=k_factor
        )

    @staticmethod
    def _build_match_record(player1, player2, winner_id, winner_score, loser_score,
                            winner_elo, loser_elo, result, match_type, date, duration) -> Dict[str, Any]:
        return {
            'player1_id': player1.id,
            'player2_id': player2.id,
            'player1_name': player1.name,
            'player2_name': player2.name,
            'player1_deck': player1.main_deck_name,
            'player2_deck': player2.main_deck_name,
            'winner_id': winner_id,
            'winner_score': winner_score,
            'loser_score': loser_score,
            'winner_elo': winner_elo,
            'loser_elo': loser_elo,
            'elo_change': result.elo_change,
            'dominant_win_bonus': result.dominant_win_bonus,
            'streak_bonus': result.streak_bonus,
            'date': date,
            'duration': duration,
            'match_type': match_type
        }

    @staticmethod
    def _recent_with(player, match_id: str) -> list:
        return ([match_id] + list(player.recent_matches or []))[:Config.RECENT_MATCHES_LIMIT]

    def _winner_updates(self, winner, new_elo: int, match_id: str) -> Dict[str, Any]:
        wins = (winner.wins or 0) + 1
        total_matches = (winner.total_matches or 0) + 1
        return {
            'elo': new_elo,
            'tier': get_tier_from_elo(new_elo),
            'wins': wins,
            'total_matches': total_matches,
            'win_rate': EloCalculator.calculate_win_rate(wins, total_matches),
            'streak': next_win_streak(winner.streak or 0),
            'peak_elo': max(winner.peak_elo or winner.elo, new_elo),
            'recent_matches': self._recent_with(winner, match_id)
        }

    def _loser_updates(self, loser, new_elo: int, match_id: str) -> Dict[str, Any]:
        losses = (loser.losses or 0) + 1
        total_matches = (loser.total_matches or 0) + 1
        return {
            'elo': new_elo,
            'tier': get_tier_from_elo(new_elo),
            'losses': losses,
            'total_matches': total_matches,
            'win_rate': EloCalculator.calculate_win_rate(loser.wins or 0, total_matches),
            'streak': next_loss_streak(loser.streak or 0),
            'recent_matches': self._recent_with(loser, match_id)
        }
