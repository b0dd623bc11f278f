"""Student-facing API routes (any authenticated user)."""

from uuid import UUID

from fastapi import APIRouter, Body, Depends

from ..deps import get_challenge_service, get_workout_service
from ..middleware.auth import CurrentUser, get_current_user
from ..schemas import (
    ChallengeStatusListResponse,
    CompleteChallengeRequest,
    CompleteChallengeResponse,
    LeaderboardResponse,
    MeResponse,
    PublicUser,
    WorkoutDetailResponse,
    WorkoutListResponse,
)
from ...services.challenge_service import ChallengeService
from ...services.workout_service import WorkoutService


router = APIRouter(prefix="/app", tags=["app"])


@router.get("/me", response_model=MeResponse)
def me(current_user: CurrentUser = Depends(get_current_user)):
    return {
        "user": PublicUser(
            id=current_user.id,
            name=current_user.name,
            email=current_user.email,
            role=current_user.role,
        )
    }


@router.get("/workouts", response_model=WorkoutListResponse)
def list_workouts(
    current_user: CurrentUser = Depends(get_current_user),
    workouts: WorkoutService = Depends(get_workout_service),
):
    """Global templates plus the caller's own workouts, newest first."""
    return {"workouts": [w.to_dict() for w in workouts.list_visible_to(current_user.id)]}


@router.get("/workouts/{workout_id}", response_model=WorkoutDetailResponse)
def get_workout(
    workout_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    workouts: WorkoutService = Depends(get_workout_service),
):
    workout, items = workouts.get_visible_with_items(str(workout_id), current_user.id)
    return {"workout": workout.to_dict(), "items": [item.to_dict() for item in items]}


@router.get("/challenges", response_model=ChallengeStatusListResponse)
def list_challenges(
    current_user: CurrentUser = Depends(get_current_user),
    challenges: ChallengeService = Depends(get_challenge_service),
):
    """Active challenges for the caller with their completion in the current window."""
    return challenges.list_for_user(current_user.id)


@router.post("/challenges/{challenge_id}/complete", response_model=CompleteChallengeResponse)
def complete_challenge(
    challenge_id: UUID,
    body: CompleteChallengeRequest | None = Body(default=None),
    current_user: CurrentUser = Depends(get_current_user),
    challenges: ChallengeService = Depends(get_challenge_service),
):
    """Mark a challenge done for the current day/week, or undo it with ``completed: false``."""
    completed = body.completed if body is not None else True
    result = challenges.set_completed(current_user.id, str(challenge_id), completed)
    return {"ok": True, "completed": result.completed, "key": result.key}


@router.get("/leaderboard", response_model=LeaderboardResponse)
def leaderboard(
    current_user: CurrentUser = Depends(get_current_user),
    challenges: ChallengeService = Depends(get_challenge_service),
):
    return {"leaderboard": [entry.to_dict() for entry in challenges.leaderboard()]}
