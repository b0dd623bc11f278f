"""Workouts: creation by staff, template assignment and student visibility."""

from typing import Any, Dict, List, Optional, Tuple

from ..db.database import GymDatabase
from ..db.repositories.user_repository import UserRepository
from ..db.repositories.workout_repository import Workout, WorkoutItem, WorkoutRepository
from ..exceptions import (
    TemplateNotFoundError,
    UserNotFoundError,
    ValidationError,
    WorkoutNotFoundError,
)
from .base import BaseService


class WorkoutService(BaseService):
    """Business rules for workouts and template assignment."""

    def __init__(self, db: GymDatabase) -> None:
        super().__init__(db)
        self._workouts = WorkoutRepository(db)
        self._users = UserRepository(db)

    def create_workout(
        self,
        created_by: str,
        title: str,
        objective: str,
        week_start: Optional[str] = None,
        user_id: Optional[str] = None,
        is_template: bool = False,
        items: Optional[List[Dict[str, Any]]] = None,
    ) -> Workout:
        """
        Create a template or a workout for one user, with its items.

        Raises:
            ValidationError: If a template is given an owner
            UserNotFoundError: If ``user_id`` does not exist
        """
        if is_template and user_id:
            raise ValidationError("A template cannot belong to a user", field="user_id")
        if user_id and self._users.get_by_id(user_id) is None:
            raise UserNotFoundError(user_id)

        workout = self._workouts.create_workout(
            title=title,
            objective=objective,
            created_by=created_by,
            week_start=week_start,
            user_id=user_id,
            is_template=is_template,
            items=items,
        )
        kind = "template" if is_template else "workout"
        self.logger.info(f"Created {kind} {workout.id} with {len(workout.items)} items")
        return workout

    def assign_template(
        self,
        template_id: str,
        user_id: str,
        assigned_by: str,
        week_start: Optional[str] = None,
    ) -> Workout:
        """
        Give a student their own copy of a template.

        Raises:
            TemplateNotFoundError: If ``template_id`` is not a template
            UserNotFoundError: If ``user_id`` is not an existing aluno
        """
        if self._workouts.get_template(template_id) is None:
            raise TemplateNotFoundError(template_id)
        if self._users.get_student(user_id) is None:
            raise UserNotFoundError(user_id, resource_type="Student")

        workout = self._workouts.assign_template(
            template_id=template_id,
            user_id=user_id,
            assigned_by=assigned_by,
            week_start=week_start,
        )
        self.logger.info(
            f"Assigned template {template_id} to user {user_id} as workout {workout.id}"
        )
        return workout

    def list_all(self) -> List[Workout]:
        return self._workouts.list_all()

    def list_for_user(self, user_id: str) -> List[Workout]:
        return self._workouts.list_for_user(user_id)

    def list_visible_to(self, user_id: str) -> List[Workout]:
        return self._workouts.list_visible_to(user_id)

    def get_with_items(self, workout_id: str) -> Tuple[Workout, List[WorkoutItem]]:
        workout = self._workouts.get_workout(workout_id)
        if workout is None:
            raise WorkoutNotFoundError(workout_id)
        return workout, self._workouts.get_items(workout_id)

    def get_visible_with_items(
        self, workout_id: str, user_id: str
    ) -> Tuple[Workout, List[WorkoutItem]]:
        """A workout the user may read (global template or their own) and its items."""
        workout = self._workouts.get_visible_workout(workout_id, user_id)
        if workout is None:
            raise WorkoutNotFoundError(workout_id)
        return workout, self._workouts.get_items(workout_id)
