"""Staff API routes.

Every route here needs an admin or professor. Managing user accounts
(``/admin/users``) is reserved to admins.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ..deps import (
    get_challenge_service,
    get_password_reset_service,
    get_user_service,
    get_workout_service,
)
from ..middleware.auth import CurrentUser, require_admin, require_staff
from ..schemas import (
    AssignWorkoutRequest,
    AssignWorkoutResponse,
    ChallengeListResponse,
    ChallengeResponse,
    CreateChallengeRequest,
    CreateStudentRequest,
    CreateUserRequest,
    CreateWorkoutRequest,
    LeaderboardResponse,
    OkResponse,
    Role,
    StudentDetailResponse,
    StudentListResponse,
    StudentResponse,
    UpdateUserRequest,
    UserListResponse,
    UserResponse,
    WorkoutDetailResponse,
    WorkoutListResponse,
    WorkoutResponse,
    iso_or_none,
    str_or_none,
)
from ...services.challenge_service import ChallengeService
from ...services.password_reset_service import PasswordResetService
from ...services.user_service import UserService
from ...services.workout_service import WorkoutService


router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_staff)],
)


# ============================================================================
# Users (admin only)
# ============================================================================

@router.get("/users", response_model=UserListResponse)
def list_users(
    role: Optional[Role] = Query(None),
    _: CurrentUser = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return {"users": [u.to_dict() for u in users.list_users(role)]}


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: CreateUserRequest,
    _: CurrentUser = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    user = users.create_user(
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
        **body.profile_dict(),
    )
    return {"user": user.to_dict()}


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(
    user_id: UUID,
    _: CurrentUser = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return {"user": users.get_user(str(user_id)).to_dict()}


@router.patch("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: UUID,
    body: UpdateUserRequest,
    _: CurrentUser = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    """Change only the fields present in the body; null clears a profile field."""
    user = users.update_user(str(user_id), body.changes())
    return {"user": user.to_dict()}


@router.post("/users/{user_id}/password-reset", response_model=OkResponse)
def send_password_reset(
    user_id: UUID,
    _: CurrentUser = Depends(require_admin),
    resets: PasswordResetService = Depends(get_password_reset_service),
):
    """Email the user a password reset link."""
    resets.issue_for_user(str(user_id))
    return OkResponse()


# ============================================================================
# Students
# ============================================================================

@router.get("/alunos", response_model=StudentListResponse)
def list_students(users: UserService = Depends(get_user_service)):
    return {"alunos": [u.to_dict() for u in users.list_students()]}


@router.post("/alunos", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    body: CreateStudentRequest,
    users: UserService = Depends(get_user_service),
):
    student = users.create_user(
        name=body.name,
        email=body.email,
        password=body.password,
        role="aluno",
    )
    return {"aluno": student.to_dict()}


@router.get("/alunos/{user_id}", response_model=StudentDetailResponse)
def get_student(
    user_id: UUID,
    users: UserService = Depends(get_user_service),
    workouts: WorkoutService = Depends(get_workout_service),
):
    """A student and every workout they own."""
    student = users.get_student(str(user_id))
    return {
        "aluno": student.to_dict(),
        "treinos": [w.to_dict() for w in workouts.list_for_user(student.id)],
    }


# ============================================================================
# Workouts
# ============================================================================

@router.get("/workouts", response_model=WorkoutListResponse)
def list_workouts(workouts: WorkoutService = Depends(get_workout_service)):
    return {"workouts": [w.to_dict() for w in workouts.list_all()]}


@router.post("/workouts", response_model=WorkoutResponse, status_code=status.HTTP_201_CREATED)
def create_workout(
    body: CreateWorkoutRequest,
    current_user: CurrentUser = Depends(require_staff),
    workouts: WorkoutService = Depends(get_workout_service),
):
    workout = workouts.create_workout(
        created_by=current_user.id,
        title=body.title,
        objective=body.objective,
        week_start=iso_or_none(body.week_start),
        user_id=str_or_none(body.user_id),
        is_template=body.is_template,
        items=[item.model_dump() for item in body.items],
    )
    return {"workout": workout.to_dict()}


@router.get("/workouts/{workout_id}", response_model=WorkoutDetailResponse)
def get_workout(
    workout_id: UUID,
    workouts: WorkoutService = Depends(get_workout_service),
):
    workout, items = workouts.get_with_items(str(workout_id))
    return {"workout": workout.to_dict(), "items": [item.to_dict() for item in items]}


@router.post(
    "/workouts/{workout_id}/assign",
    response_model=AssignWorkoutResponse,
    status_code=status.HTTP_201_CREATED,
)
def assign_workout(
    workout_id: UUID,
    body: AssignWorkoutRequest,
    current_user: CurrentUser = Depends(require_staff),
    workouts: WorkoutService = Depends(get_workout_service),
):
    """Copy a template, items included, into a new workout for a student."""
    workout = workouts.assign_template(
        template_id=str(workout_id),
        user_id=str(body.user_id),
        assigned_by=current_user.id,
        week_start=iso_or_none(body.week_start),
    )
    return {"workout_id": workout.id}


# ============================================================================
# Challenges
# ============================================================================

@router.get("/challenges", response_model=ChallengeListResponse)
def list_challenges(challenges: ChallengeService = Depends(get_challenge_service)):
    return {"challenges": [c.to_dict() for c in challenges.list_all()]}


@router.post("/challenges", response_model=ChallengeResponse, status_code=status.HTTP_201_CREATED)
def create_challenge(
    body: CreateChallengeRequest,
    current_user: CurrentUser = Depends(require_staff),
    challenges: ChallengeService = Depends(get_challenge_service),
):
    challenge = challenges.create_challenge(
        created_by=current_user.id,
        title=body.title,
        points=body.points,
        frequency=body.frequency,
        active_from=iso_or_none(body.active_from),
        active_to=iso_or_none(body.active_to),
        user_id=str_or_none(body.user_id),
    )
    return {"challenge": challenge.to_dict()}


@router.get("/leaderboard", response_model=LeaderboardResponse)
def leaderboard(challenges: ChallengeService = Depends(get_challenge_service)):
    return {"leaderboard": [entry.to_dict() for entry in challenges.leaderboard()]}
