"""
API schemas for request/response validation.

Request bodies are validated here; anything that fails becomes a 400
VALIDATION_ERROR response. Timestamps in requests may be any ISO-8601
datetime and are stored normalized to ``YYYY-MM-DDTHH:MM:SS.sssZ``.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..utils.timeutils import to_iso

Role = Literal["aluno", "professor", "admin"]
Frequency = Literal["daily", "weekly"]


def iso_or_none(value: Optional[datetime]) -> Optional[str]:
    return to_iso(value) if value is not None else None


def str_or_none(value: Optional[UUID]) -> Optional[str]:
    return str(value) if value is not None else None


# ============================================================================
# Base Response Models
# ============================================================================

class ErrorDetail(BaseModel):
    """Error detail for API responses."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: ErrorDetail

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": {
                    "code": "NOT_FOUND",
                    "message": "Workout not found",
                }
            }
        }
    )


class OkResponse(BaseModel):
    ok: bool = True


# ============================================================================
# User Schemas
# ============================================================================

class PublicUser(BaseModel):
    """The user fields carried by login, register and /app/me."""

    id: str
    name: str
    email: str
    role: Role


class UserDetail(PublicUser):
    """Full user record as shown to admins (never the password hash)."""

    created_at: str
    updated_at: Optional[str] = None
    phone: Optional[str] = None
    birthdate: Optional[str] = None
    avatar_url: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None


class ProfileFields(BaseModel):
    """Optional profile fields editable by admins."""

    phone: Optional[str] = Field(None, max_length=40)
    birthdate: Optional[date] = None
    avatar_url: Optional[str] = Field(None, max_length=2048)
    address_line1: Optional[str] = Field(None, max_length=200)
    address_line2: Optional[str] = Field(None, max_length=200)
    city: Optional[str] = Field(None, max_length=120)
    state: Optional[str] = Field(None, max_length=120)
    zip: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=120)

    def profile_dict(self, exclude_unset: bool = False) -> Dict[str, Optional[str]]:
        data = self.model_dump(include=set(ProfileFields.model_fields), exclude_unset=exclude_unset)
        if isinstance(data.get("birthdate"), date):
            data["birthdate"] = data["birthdate"].isoformat()
        return data


# ============================================================================
# Auth Schemas
# ============================================================================

class RegisterRequest(BaseModel):
    """Request model for student self-registration."""

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")


class LoginRequest(BaseModel):
    """Request model for login.

    The email is not format-checked: seeded accounts may use addresses such
    as ``admin@apegym.local`` that strict validators reject.
    """

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    token: str
    user: PublicUser


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., min_length=1)


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
    password_confirm: str = Field(..., min_length=1)


# ============================================================================
# Workout Schemas
# ============================================================================

class WorkoutItemIn(BaseModel):
    """One exercise of a workout being created."""

    name: str = Field(..., min_length=1)
    sets: Optional[int] = Field(None, ge=1)
    reps: Optional[str] = Field(None, min_length=1)
    weight: Optional[str] = Field(None, min_length=1)
    rest_seconds: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class WorkoutItemOut(BaseModel):
    id: str
    workout_id: str
    name: str
    sets: Optional[int] = None
    reps: Optional[str] = None
    weight: Optional[str] = None
    rest_seconds: Optional[int] = None
    notes: Optional[str] = None
    order_index: int


class WorkoutOut(BaseModel):
    id: str
    title: str
    objective: str
    week_start: Optional[str] = None
    user_id: Optional[str] = None
    is_template: bool
    parent_workout_id: Optional[str] = None
    assigned_at: Optional[str] = None
    created_by: str
    created_at: str


class CreateWorkoutRequest(BaseModel):
    """Request model for creating a template or a workout for one user."""

    title: str = Field(..., min_length=1)
    objective: str = Field(..., min_length=1)
    week_start: Optional[datetime] = None
    user_id: Optional[UUID] = None
    is_template: bool = False
    items: List[WorkoutItemIn] = Field(default_factory=list)


class AssignWorkoutRequest(BaseModel):
    user_id: UUID
    week_start: Optional[datetime] = None


class WorkoutListResponse(BaseModel):
    workouts: List[WorkoutOut]


class WorkoutResponse(BaseModel):
    workout: WorkoutOut


class WorkoutDetailResponse(BaseModel):
    workout: WorkoutOut
    items: List[WorkoutItemOut]


class AssignWorkoutResponse(BaseModel):
    workout_id: str


# ============================================================================
# Challenge Schemas
# ============================================================================

class ChallengeOut(BaseModel):
    id: str
    title: str
    points: int
    frequency: Frequency
    active_from: Optional[str] = None
    active_to: Optional[str] = None
    user_id: Optional[str] = None
    created_by: str
    created_at: str


class ChallengeStatus(ChallengeOut):
    """A challenge as seen by a student, with its completion in the current window."""

    completed: bool


class Period(BaseModel):
    dayKey: str
    weekKey: str


class ChallengeStatusListResponse(BaseModel):
    period: Period
    challenges: List[ChallengeStatus]


class CreateChallengeRequest(BaseModel):
    """Request model for creating a challenge; omit ``user_id`` for every student."""

    title: str = Field(..., min_length=1)
    points: int = Field(0, ge=0)
    frequency: Frequency
    active_from: Optional[datetime] = None
    active_to: Optional[datetime] = None
    user_id: Optional[UUID] = None


class CompleteChallengeRequest(BaseModel):
    completed: bool = True


class CompleteChallengeResponse(BaseModel):
    ok: bool = True
    completed: bool
    key: str


class ChallengeListResponse(BaseModel):
    challenges: List[ChallengeOut]


class ChallengeResponse(BaseModel):
    challenge: ChallengeOut


class LeaderboardEntryOut(BaseModel):
    user_id: str
    name: str
    email: str
    points: int


class LeaderboardResponse(BaseModel):
    leaderboard: List[LeaderboardEntryOut]


# ============================================================================
# Admin Schemas
# ============================================================================

class CreateStudentRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=6)


class CreateUserRequest(ProfileFields):
    """Request model for an admin creating any kind of account."""

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Role = "aluno"


class UpdateUserRequest(ProfileFields):
    """Partial update: only the fields present in the body are changed."""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    password: Optional[str] = Field(None, min_length=6)

    def changes(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        data.update(self.profile_dict(exclude_unset=True))
        return data


class UserListResponse(BaseModel):
    users: List[UserDetail]


class UserResponse(BaseModel):
    user: UserDetail


class MeResponse(BaseModel):
    user: PublicUser


class StudentListResponse(BaseModel):
    alunos: List[UserDetail]


class StudentResponse(BaseModel):
    aluno: UserDetail


class StudentDetailResponse(BaseModel):
    aluno: UserDetail
    treinos: List[WorkoutOut]
