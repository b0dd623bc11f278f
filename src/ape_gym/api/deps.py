"""Dependency injection for API routes.

Everything hangs off ``get_database``; tests swap the whole data layer by
overriding that one dependency.
"""

from functools import lru_cache

from fastapi import Depends

from ..db.database import GymDatabase
from ..services.challenge_service import ChallengeService
from ..services.password_reset_service import PasswordResetService
from ..services.user_service import UserService
from ..services.workout_service import WorkoutService


@lru_cache
def get_database() -> GymDatabase:
    """Get the database instance (created and migrated on first use)."""
    return GymDatabase()


def get_user_service(db: GymDatabase = Depends(get_database)) -> UserService:
    return UserService(db)


def get_workout_service(db: GymDatabase = Depends(get_database)) -> WorkoutService:
    return WorkoutService(db)


def get_challenge_service(db: GymDatabase = Depends(get_database)) -> ChallengeService:
    return ChallengeService(db)


def get_password_reset_service(
    db: GymDatabase = Depends(get_database),
) -> PasswordResetService:
    return PasswordResetService(db)
