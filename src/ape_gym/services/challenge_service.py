"""Challenges, their daily/weekly completion windows and the leaderboard.

A completion is keyed by the start of the window it falls in: UTC midnight
for daily challenges, UTC midnight of the Monday for weekly ones. The
``UNIQUE(user_id, challenge_id, completed_at)`` constraint then limits each
student to one credit per challenge per window.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from ..config import Settings, get_settings
from ..db.database import GymDatabase
from ..db.repositories.challenge_repository import (
    Challenge,
    ChallengeRepository,
    LeaderboardEntry,
)
from ..db.repositories.user_repository import UserRepository
from ..db.schema import CHALLENGE_FREQUENCIES
from ..exceptions import ChallengeNotFoundError, UserNotFoundError, ValidationError
from ..utils.timeutils import period_key, to_iso, utc_day_key, utc_now, utc_week_key
from .base import BaseService


@dataclass
class CompletionResult:
    completed: bool
    key: str
    changed: bool


class ChallengeService(BaseService):
    """Business rules for challenges and completions."""

    def __init__(self, db: GymDatabase, settings: Optional[Settings] = None) -> None:
        super().__init__(db)
        self._settings = settings or get_settings()
        self._challenges = ChallengeRepository(db)
        self._users = UserRepository(db)

    def create_challenge(
        self,
        created_by: str,
        title: str,
        frequency: str,
        points: int = 0,
        active_from: Optional[str] = None,
        active_to: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Challenge:
        """
        Create a challenge, global when ``user_id`` is None.

        Raises:
            ValidationError: On an unknown frequency, negative points or an
                             empty activity window
            UserNotFoundError: If ``user_id`` does not exist
        """
        if frequency not in CHALLENGE_FREQUENCIES:
            raise ValidationError(f"Unknown frequency: {frequency}", field="frequency")
        if points < 0:
            raise ValidationError("Points cannot be negative", field="points")
        if active_from and active_to and active_from > active_to:
            raise ValidationError("active_from must not be after active_to", field="active_to")
        if user_id and self._users.get_by_id(user_id) is None:
            raise UserNotFoundError(user_id)

        challenge = self._challenges.create_challenge(
            title=title,
            points=points,
            frequency=frequency,
            created_by=created_by,
            active_from=active_from,
            active_to=active_to,
            user_id=user_id,
        )
        self.logger.info(f"Created {frequency} challenge {challenge.id}")
        return challenge

    def list_all(self) -> List[Challenge]:
        return self._challenges.list_all()

    def current_period(self, now: Optional[datetime] = None) -> Dict[str, str]:
        now = now or utc_now()
        return {"dayKey": utc_day_key(now), "weekKey": utc_week_key(now)}

    def list_for_user(
        self, user_id: str, now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        Active challenges visible to the user, each flagged with whether it
        is already completed in its current window.

        Returns:
            ``{"period": {"dayKey", "weekKey"}, "challenges": [...]}``
        """
        now = now or utc_now()
        period = self.current_period(now)
        challenges = self._challenges.list_active_for_user(user_id, to_iso(now))

        daily = [c.id for c in challenges if c.frequency == "daily"]
        weekly = [c.id for c in challenges if c.frequency == "weekly"]
        done = self._challenges.completed_ids(user_id, period["dayKey"], daily)
        done |= self._challenges.completed_ids(user_id, period["weekKey"], weekly)

        return {
            "period": period,
            "challenges": [
                {**challenge.to_dict(), "completed": challenge.id in done}
                for challenge in challenges
            ],
        }

    def set_completed(
        self,
        user_id: str,
        challenge_id: str,
        completed: bool = True,
        now: Optional[datetime] = None,
    ) -> CompletionResult:
        """
        Mark a challenge done (or not done) for the current window.

        Both directions are idempotent: completing twice keeps one credit,
        un-completing something not completed is a no-op.

        Raises:
            ChallengeNotFoundError: If the challenge is not global or the user's own
        """
        challenge = self._challenges.get_visible(challenge_id, user_id)
        if challenge is None:
            raise ChallengeNotFoundError(challenge_id)

        key = period_key(challenge.frequency, now or utc_now())
        if completed:
            changed = self._challenges.add_completion(user_id, challenge_id, key)
        else:
            changed = self._challenges.remove_completion(user_id, challenge_id, key)

        if changed:
            action = "completed" if completed else "un-completed"
            self.logger.info(f"User {user_id} {action} challenge {challenge_id} for {key}")
        return CompletionResult(completed=completed, key=key, changed=changed)

    def leaderboard(self, now: Optional[datetime] = None) -> List[LeaderboardEntry]:
        """Students ranked by points from completions in the recent window."""
        now = now or utc_now()
        since = now - timedelta(days=self._settings.leaderboard_window_days)
        return self._challenges.leaderboard(to_iso(since), self._settings.leaderboard_limit)
