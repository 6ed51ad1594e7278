from sqlalchemy import (
    Column, Integer, String, DateTime, JSON, Enum as SQLEnum, CheckConstraint
)
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from leaderboard.config import Config
from leaderboard.constants import PlayerTier, MatchType, UNKNOWN_DECK
from leaderboard.utils.elo import EloCalculator
from leaderboard.utils.tiers import get_tier_from_elo

Base = declarative_base()


def utc_now() -> datetime:
    """Naive UTC timestamp, the form SQLite hands back"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return uuid4().hex


class Player(Base):
    __tablename__ = 'players'

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(128), nullable=True, index=True)  # Linked account, optional
    name = Column(String(100), nullable=False)
    avatar = Column(String(500), nullable=True)

    # Rating state
    elo = Column(Integer, default=Config.STARTING_ELO, nullable=False, index=True)
    peak_elo = Column(Integer, default=Config.STARTING_ELO, nullable=False)
    tier = Column(SQLEnum(PlayerTier), default=PlayerTier.SILVER, nullable=False)
    rank = Column(Integer, default=0)

    # Record state (derived from the match log)
    wins = Column(Integer, default=0, nullable=False)
    losses = Column(Integer, default=0, nullable=False)
    total_matches = Column(Integer, default=0, nullable=False)
    win_rate = Column(Integer, default=0, nullable=False)
    streak = Column(Integer, default=0, nullable=False)       # + winning run, - losing run
    recent_matches = Column(JSON, default=list)               # Match ids, newest first

    # Decks: legacy single main deck, newer list of {archetype_id, archetype_name, is_main}
    main_deck = Column(String(100), nullable=True)
    decks = Column(JSON, default=list)

    # Season carry-over, written only by season resets
    last_season_elo = Column(Integer, nullable=True)
    last_season_peak_elo = Column(Integer, nullable=True)
    last_season_rank = Column(Integer, nullable=True)

    # Metadata
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    __table_args__ = (
        CheckConstraint('wins >= 0', name='ck_players_wins_non_negative'),
        CheckConstraint('losses >= 0', name='ck_players_losses_non_negative'),
    )

    @property
    def main_deck_name(self) -> str:
        """Deck label shown on matches: legacy main_deck, then the deck flagged main"""
        if self.main_deck:
            return self.main_deck
        for deck in self.decks or []:
            if deck.get('is_main') and deck.get('archetype_name'):
                return deck['archetype_name']
        return UNKNOWN_DECK

    def __repr__(self):
        return f"<Player(id='{self.id}', name='{self.name}', elo={self.elo}, rank={self.rank})>"


class Match(Base):
    __tablename__ = 'matches'

    id = Column(String(32), primary_key=True, default=new_id)

    # Participants, denormalized at time of play
    player1_id = Column(String(32), nullable=False, index=True)
    player2_id = Column(String(32), nullable=False, index=True)
    player1_name = Column(String(100))
    player2_name = Column(String(100))
    player1_deck = Column(String(100), default=UNKNOWN_DECK)
    player2_deck = Column(String(100), default=UNKNOWN_DECK)

    # Outcome
    winner_id = Column(String(32), nullable=False)
    winner_score = Column(Integer, nullable=False)
    loser_score = Column(Integer, nullable=False)

    # Rating audit (ratings before the match)
    winner_elo = Column(Integer, nullable=False)
    loser_elo = Column(Integer, nullable=False)
    elo_change = Column(Integer, nullable=False, default=0)
    dominant_win_bonus = Column(Integer, default=0)
    streak_bonus = Column(Integer, default=0)

    date = Column(DateTime, default=utc_now, nullable=False, index=True)
    duration = Column(Integer, default=Config.DEFAULT_MATCH_DURATION)  # minutes
    match_type = Column(SQLEnum(MatchType), default=MatchType.RANKED, nullable=False)

    # Insertion time, orders matches that share a date
    created_at = Column(DateTime, default=utc_now, nullable=False)

    __table_args__ = (
        CheckConstraint('player1_id != player2_id', name='ck_matches_distinct_players'),
        CheckConstraint('winner_score >= loser_score', name='ck_matches_winner_score'),
        CheckConstraint('elo_change >= 0', name='ck_matches_elo_change'),
    )

    def involves(self, player_id: str) -> bool:
        return player_id in (self.player1_id, self.player2_id)

    def __repr__(self):
        return (f"<Match(id='{self.id}', {self.player1_id} vs {self.player2_id}, "
                f"winner='{self.winner_id}', {self.winner_score}-{self.loser_score})>")


def apply_player_defaults(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fill absent player fields with registration defaults.

    Records written by older revisions may lack the deck list, the peak
    rating or the counters; this gives every record the same shape before
    it is stored. The tier is always derived from the rating.
    """
    player = dict(fields)
    elo = player.get('elo')
    if elo is None:
        elo = Config.STARTING_ELO
    player['elo'] = elo
    if player.get('peak_elo') is None:
        player['peak_elo'] = elo

    for counter in ('wins', 'losses', 'streak'):
        if player.get(counter) is None:
            player[counter] = 0
    player['total_matches'] = player['wins'] + player['losses']
    player['win_rate'] = EloCalculator.calculate_win_rate(player['wins'], player['total_matches'])

    player['tier'] = get_tier_from_elo(elo)
    player.setdefault('rank', 0)

    decks: Optional[List[Dict[str, Any]]] = player.get('decks')
    if not decks and player.get('main_deck'):
        decks = [{
            'archetype_id': None,
            'archetype_name': player['main_deck'],
            'is_main': True
        }]
    player['decks'] = decks or []
    if player.get('recent_matches') is None:
        player['recent_matches'] = []
    return player
