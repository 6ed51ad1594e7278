"""
Leaderboard read model: ranked standings and headline numbers for the
public page.
"""

from collections import Counter
from dataclasses import dataclass
from typing import List, Optional

from leaderboard.constants import UNKNOWN_DECK
from leaderboard.database.models import Player
from leaderboard.utils.elo import round_half_up
from leaderboard.utils.logger import setup_logger
from leaderboard.utils.ranking import RankingUtility

logger = setup_logger(__name__)

FEATURED_PLAYER_COUNT = 4


@dataclass
class LeaderboardStats:
    total_players: int
    average_elo: int
    top_player_elo: int
    total_matches: int
    most_played_deck: Optional[str]


@dataclass
class LeaderboardPage:
    top_player: Optional[Player]
    featured_players: List[Player]
    players: List[Player]


class LeaderboardService:
    """Read-only views over players and matches."""

    def __init__(self, database):
        self.db = database

    async def get_standings(self, limit: Optional[int] = None, offset: int = 0) -> List[Player]:
        """Players in rank order."""
        players = RankingUtility.sort_by_rating(await self.db.list_players())
        end = None if limit is None else offset + limit
        return players[offset:end]

    async def get_leaderboard_page(self) -> LeaderboardPage:
        """Split the standings into the top player, featured players and the rest."""
        standings = await self.get_standings()
        return LeaderboardPage(
            top_player=standings[0] if standings else None,
            featured_players=standings[1:1 + FEATURED_PLAYER_COUNT],
            players=standings[1 + FEATURED_PLAYER_COUNT:]
        )

    async def get_leaderboard_stats(self) -> LeaderboardStats:
        players = await self.db.list_players()
        matches = await self.db.list_matches()

        total_players = len(players)
        average_elo = round_half_up(sum(p.elo for p in players) / total_players) if total_players else 0

        deck_counts = Counter(
            deck
            for match in matches
            for deck in (match.player1_deck, match.player2_deck)
            if deck and deck != UNKNOWN_DECK
        )
        most_played_deck = deck_counts.most_common(1)[0][0] if deck_counts else None

        logger.debug(f"Leaderboard stats computed for {total_players} players, {len(matches)} matches")
        return LeaderboardStats(
            total_players=total_players,
            average_elo=average_elo,
            top_player_elo=max((p.elo for p in players), default=0),
            total_matches=len(matches),
            most_played_deck=most_played_deck
        )
