"""Repository layer over the Ape Gym SQLite database."""

from .base import SQLiteRepository
from .challenge_repository import Challenge, ChallengeRepository, LeaderboardEntry
from .password_reset_repository import PasswordResetRepository, PasswordResetToken
from .user_repository import PROFILE_FIELDS, User, UserRepository
from .workout_repository import Workout, WorkoutItem, WorkoutRepository

__all__ = [
    "SQLiteRepository",
    "Challenge",
    "ChallengeRepository",
    "LeaderboardEntry",
    "PasswordResetRepository",
    "PasswordResetToken",
    "PROFILE_FIELDS",
    "User",
    "UserRepository",
    "Workout",
    "WorkoutItem",
    "WorkoutRepository",
]
