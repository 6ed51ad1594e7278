"""
Locals Leaderboard

Rating engine and statistics reconciliation for a local trading card game
scene: Elo updates with dominant-win and streak bonuses, tiers, ranks,
and season resets over an async SQLAlchemy store.
"""

__version__ = "1.0.0"
