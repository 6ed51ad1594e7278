"""Builders for players and matches used across the test suite."""

from datetime import datetime, timedelta
from itertools import count

from leaderboard.database.models import Match, Player


BASE_DATE = datetime(2024, 3, 1, 18, 0, 0)
_match_ids = count(1)


def make_player(player_id: str, elo: int = 1200, rank: int = 0, **fields) -> Player:
    """Detached player for pure-function tests"""
    return Player(id=player_id, name=fields.pop('name', player_id.title()), elo=elo, rank=rank, **fields)


def make_match(player1_id: str, player2_id: str, winner_id: str, day: int = 0,
               created_at: datetime = None, **fields) -> Match:
    """Detached match played `day` days after BASE_DATE"""
    date = fields.pop('date', BASE_DATE + timedelta(days=day))
    return Match(
        id=fields.pop('id', f"m{next(_match_ids)}"),
        player1_id=player1_id,
        player2_id=player2_id,
        winner_id=winner_id,
        winner_score=fields.pop('winner_score', 2),
        loser_score=fields.pop('loser_score', 1),
        winner_elo=fields.pop('winner_elo', 1200),
        loser_elo=fields.pop('loser_elo', 1200),
        elo_change=fields.pop('elo_change', 16),
        date=date,
        created_at=created_at or date,
        **fields
    )


def match_fields(player1_id: str, player2_id: str, winner_id: str, day: int = 0, **fields) -> dict:
    """Fields for Database.create_match"""
    date = fields.pop('date', BASE_DATE + timedelta(days=day))
    values = {
        'player1_id': player1_id,
        'player2_id': player2_id,
        'winner_id': winner_id,
        'winner_score': 2,
        'loser_score': 1,
        'winner_elo': 1200,
        'loser_elo': 1200,
        'elo_change': 16,
        'date': date,
        'created_at': date,
    }
    values.update(fields)
    return values
