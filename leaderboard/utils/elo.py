import math
from dataclasses import dataclass
from leaderboard.config import Config


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity (2.5 -> 3, -2.5 -> -2)"""
    return int(math.floor(value + 0.5))


@dataclass
class EloCalculation:
    """Rating update for one completed match"""
    new_winner_elo: int
    new_loser_elo: int
    elo_change: int
    dominant_win_bonus: int = 0
    streak_bonus: int = 0


class EloCalculator:
    """Handles Elo rating calculations for the leaderboard"""

    @staticmethod
    def calculate_expected_score(rating_a: int, rating_b: int) -> float:
        """
        Calculate the expected score for player A against player B

        Args:
            rating_a: Player A's current Elo rating
            rating_b: Player B's current Elo rating

        Returns:
            Expected score (0.0 to 1.0) for player A
        """
        return 1 / (1 + math.pow(10, (rating_b - rating_a) / 400))

    @staticmethod
    def get_k_factor(rating: int, matches_played: int) -> int:
        """
        Get the K-factor based on rating and number of matches played

        New players converge fast regardless of rating; established players
        get smaller K-factors the higher they are rated.

        Args:
            rating: Player's current Elo rating
            matches_played: Number of matches the player has played

        Returns:
            K-factor to use in Elo calculation
        """
        if matches_played < Config.PROVISIONAL_MATCH_COUNT:
            return Config.K_FACTOR_PROVISIONAL
        if rating >= Config.K_FACTOR_ELITE_THRESHOLD:
            return Config.K_FACTOR_ELITE
        if rating >= Config.K_FACTOR_HIGH_THRESHOLD:
            return Config.K_FACTOR_HIGH
        return Config.K_FACTOR_STANDARD

    @staticmethod
    def get_match_k_factor(winner_rating: int, winner_matches: int,
                           loser_rating: int, loser_matches: int) -> int:
        """K-factor for a whole match: the larger of the two players' K-factors"""
        return max(
            EloCalculator.get_k_factor(winner_rating, winner_matches),
            EloCalculator.get_k_factor(loser_rating, loser_matches)
        )

    @staticmethod
    def calculate_dominant_win_bonus(k_factor: int, winner_score: int, loser_score: int) -> int:
        """Bonus for a clean 2-0 win, 0 for anything else"""
        if winner_score == 2 and loser_score == 0:
            return round_half_up(k_factor * Config.DOMINANT_WIN_BONUS_RATE)
        return 0

    @staticmethod
    def calculate_streak_bonus(k_factor: int, winner_streak: int) -> int:
        """
        Bonus for the winner's entering streak

        Only a positive (winning) streak counts. Each game adds
        STREAK_BONUS_RATE of K, up to STREAK_BONUS_CAP games.
        """
        effective_streak = max(0, winner_streak)
        if effective_streak == 0:
            return 0
        multiplier = min(effective_streak, Config.STREAK_BONUS_CAP) * Config.STREAK_BONUS_RATE
        return round_half_up(k_factor * multiplier)

    @staticmethod
    def calculate_elo(winner_elo: int, loser_elo: int, k_factor: int = Config.K_FACTOR_STANDARD,
                      winner_score: int = 2, loser_score: int = 0,
                      winner_streak: int = 0) -> EloCalculation:
        """
        Calculate new ratings for both players of a completed match

        Bonuses are awarded to the winner only; the loser's change is the
        plain expected-score loss.

        Args:
            winner_elo: Winner's rating before the match
            loser_elo: Loser's rating before the match
            k_factor: K-factor for the match (see get_match_k_factor)
            winner_score: Games won by the winner
            loser_score: Games won by the loser
            winner_streak: Winner's streak entering the match

        Returns:
            EloCalculation with new ratings, total winner delta and bonuses
        """
        expected_winner = EloCalculator.calculate_expected_score(winner_elo, loser_elo)
        expected_loser = EloCalculator.calculate_expected_score(loser_elo, winner_elo)

        base_winner_change = k_factor * (1 - expected_winner)
        base_loser_change = k_factor * (0 - expected_loser)

        dominant_win_bonus = EloCalculator.calculate_dominant_win_bonus(k_factor, winner_score, loser_score)
        streak_bonus = EloCalculator.calculate_streak_bonus(k_factor, winner_streak)

        total_winner_change = round_half_up(base_winner_change + dominant_win_bonus + streak_bonus)

        return EloCalculation(
            new_winner_elo=round_half_up(winner_elo + total_winner_change),
            new_loser_elo=round_half_up(loser_elo + base_loser_change),
            elo_change=total_winner_change,
            dominant_win_bonus=dominant_win_bonus,
            streak_bonus=streak_bonus
        )

    @staticmethod
    def calculate_win_rate(wins: int, total_matches: int) -> int:
        """Win rate as a whole percentage, 0 when no matches were played"""
        if total_matches <= 0:
            return 0
        return round_half_up(wins / total_matches * 100)

    @staticmethod
    def calculate_win_probability(rating_a: int, rating_b: int) -> float:
        """
        Calculate win probability for player A against player B

        Returns:
            Win probability as percentage (0.0 to 100.0)
        """
        expected_score = EloCalculator.calculate_expected_score(rating_a, rating_b)
        return expected_score * 100

    @staticmethod
    def format_elo_change(elo_change: int) -> str:
        """Format Elo change for display"""
        if elo_change > 0:
            return f"+{elo_change}"
        elif elo_change < 0:
            return str(elo_change)
        else:
            return "±0"
