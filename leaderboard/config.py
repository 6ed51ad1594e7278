import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Leaderboard configuration settings"""

    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///leaderboard.db')

    # Runtime settings
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()
    # Per-module overrides, e.g. "leaderboard.database=WARNING,leaderboard.services=DEBUG"
    LOG_LEVELS = os.getenv('LOG_LEVELS', '')

    # Player defaults
    STARTING_ELO = 1200
    RECENT_MATCHES_LIMIT = 10
    DEFAULT_MATCH_DURATION = 30  # minutes

    # Elo calculation settings
    K_FACTOR_PROVISIONAL = 40  # First 30 matches
    K_FACTOR_STANDARD = 32
    K_FACTOR_HIGH = 24         # 2100+
    K_FACTOR_ELITE = 16        # 2400+
    K_FACTOR_HIGH_THRESHOLD = 2100
    K_FACTOR_ELITE_THRESHOLD = 2400
    PROVISIONAL_MATCH_COUNT = 30

    # Bonus settings
    DOMINANT_WIN_BONUS_RATE = 0.15   # 2-0 wins
    STREAK_BONUS_RATE = 0.05         # per game in the winner's streak
    STREAK_BONUS_CAP = 10            # games; caps the bonus at 50% of K

    # Tier table: "standard" (ten tiers) or "collapsed" (bronze floor)
    TIER_SCHEME = os.getenv('TIER_SCHEME', 'standard').lower()

    @classmethod
    def get_async_database_url(cls, database_url: str = None) -> str:
        """Get the database URL with an async driver"""
        url = database_url or cls.DATABASE_URL
        if url.startswith('sqlite:///'):
            url = url.replace('sqlite:///', 'sqlite+aiosqlite:///')
        return url

    @classmethod
    def get_log_level_overrides(cls) -> dict:
        """Parse LOG_LEVELS into {logger name prefix: level name}"""
        overrides = {}
        for entry in cls.LOG_LEVELS.split(','):
            if '=' not in entry:
                continue
            name, level = entry.split('=', 1)
            if name.strip() and level.strip():
                overrides[name.strip()] = level.strip().upper()
        return overrides

    @classmethod
    def validate(cls):
        """Validate that configuration is usable"""
        if not cls.DATABASE_URL:
            raise ValueError("DATABASE_URL is required")
        if cls.TIER_SCHEME not in ('standard', 'collapsed'):
            raise ValueError("TIER_SCHEME must be 'standard' or 'collapsed'")
