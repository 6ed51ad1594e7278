"""
Custom exceptions for the leaderboard with admin-friendly error messages.
"""

from typing import Dict


class LeaderboardException(Exception):
    """Base exception for leaderboard-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class MatchValidationError(LeaderboardException):
    """Raised when a match submission is rejected before anything is written."""
    def __init__(self, reason: str):
        super().__init__(
            f"Invalid match: {reason}",
            f"❌ {reason}"
        )

class PlayerValidationError(LeaderboardException):
    """Raised when player data validation fails."""
    def __init__(self, reason: str):
        super().__init__(
            f"Invalid player: {reason}",
            f"❌ {reason}"
        )

class PlayerNotFoundError(LeaderboardException):
    """Raised when a player id does not exist in the store."""
    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(
            f"Player '{player_id}' not found",
            "❌ That player no longer exists."
        )

class DatabaseError(LeaderboardException):
    """Raised when database operations fail."""
    def __init__(self, operation: str, details: str = None):
        super().__init__(
            f"Database error during {operation}: {details}",
            "❌ Database error occurred. Please try again later."
        )

class BulkOperationError(LeaderboardException):
    """Raised when some players could not be updated during a bulk pass."""
    def __init__(self, operation: str, failures: Dict[str, str], updated: int = 0):
        self.operation = operation
        self.failures = dict(failures)
        self.updated = updated
        super().__init__(
            f"{operation} failed for {len(self.failures)} player(s) "
            f"({updated} updated): {', '.join(sorted(self.failures))}",
            f"❌ {operation} partially failed. It is safe to run it again."
        )
