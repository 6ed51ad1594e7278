"""
Shared ranking utilities.

Rank is a pure function of the full player set's ratings: players are
ordered by Elo descending, ties broken by player id ascending, and
ranked by 1-based position. Both match recording and the bulk admin
operations go through this module so every caller ranks the same way.
"""

from typing import Any, Dict, Iterable, List


class RankingUtility:
    """Shared ranking logic."""

    @staticmethod
    def sort_by_rating(players: Iterable[Any]) -> List[Any]:
        """Order players by elo descending, then id ascending."""
        return sorted(players, key=lambda p: (-(p.elo or 0), str(p.id)))

    @staticmethod
    def assign_ranks(players: Iterable[Any]) -> Dict[str, int]:
        """Map each player id to its rank (1 = highest rating)."""
        return {
            player.id: position
            for position, player in enumerate(RankingUtility.sort_by_rating(players), start=1)
        }

    @staticmethod
    def changed_ranks(players: Iterable[Any]) -> Dict[str, int]:
        """Only the ranks that differ from what the players currently store."""
        players = list(players)
        ranks = RankingUtility.assign_ranks(players)
        return {
            player.id: ranks[player.id]
            for player in players
            if player.rank != ranks[player.id]
        }
