"""Startup seeding: the first admin account and the default workout templates."""

import logging
from typing import Any, Dict, List, Optional

from ..services.auth_service import hash_password
from .database import GymDatabase
from .repositories.user_repository import User, UserRepository
from .repositories.workout_repository import WorkoutRepository

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_NAME = "Administrador"

# A/B/C split handed to new gyms so staff have something to assign on day one
DEFAULT_TEMPLATES: List[Dict[str, Any]] = [
    {
        "title": "Treino A - Peito e Tríceps",
        "objective": "Hipertrofia",
        "items": [
            {"name": "Supino reto", "sets": 4, "reps": "8-10", "rest_seconds": 90},
            {"name": "Supino inclinado com halteres", "sets": 3, "reps": "10-12", "rest_seconds": 90},
            {"name": "Crucifixo", "sets": 3, "reps": "12", "rest_seconds": 60},
            {"name": "Tríceps corda", "sets": 3, "reps": "12", "rest_seconds": 60},
            {"name": "Tríceps francês", "sets": 3, "reps": "10", "rest_seconds": 60},
        ],
    },
    {
        "title": "Treino B - Costas e Bíceps",
        "objective": "Hipertrofia",
        "items": [
            {"name": "Puxada frontal", "sets": 4, "reps": "8-10", "rest_seconds": 90},
            {"name": "Remada curvada", "sets": 3, "reps": "10", "rest_seconds": 90},
            {"name": "Remada unilateral", "sets": 3, "reps": "12", "rest_seconds": 60},
            {"name": "Rosca direta", "sets": 3, "reps": "10-12", "rest_seconds": 60},
            {"name": "Rosca martelo", "sets": 3, "reps": "12", "rest_seconds": 60},
        ],
    },
    {
        "title": "Treino C - Pernas e Ombros",
        "objective": "Hipertrofia",
        "items": [
            {"name": "Agachamento livre", "sets": 4, "reps": "8-10", "rest_seconds": 120},
            {"name": "Leg press", "sets": 3, "reps": "12", "rest_seconds": 90},
            {"name": "Cadeira extensora", "sets": 3, "reps": "15", "rest_seconds": 60},
            {"name": "Desenvolvimento com halteres", "sets": 3, "reps": "10", "rest_seconds": 90},
            {"name": "Elevação lateral", "sets": 3, "reps": "12-15", "rest_seconds": 60},
        ],
    },
]


def seed_admin(
    db: GymDatabase,
    email: str,
    password: str,
    name: str = DEFAULT_ADMIN_NAME,
) -> Optional[User]:
    """
    Create an admin account unless a user with that email already exists.

    Returns:
        The created admin, or None when the email was already taken
    """
    users = UserRepository(db)
    email = email.strip().lower()
    if users.email_exists(email):
        logger.debug(f"Seed admin {email} already exists")
        return None

    admin = users.create_user(
        name=name,
        email=email,
        role="admin",
        password_hash=hash_password(password),
    )
    logger.info(f"Seeded admin account {email}")
    return admin


def seed_workout_templates(
    db: GymDatabase,
    created_by: Optional[str] = None,
    templates: Optional[List[Dict[str, Any]]] = None,
) -> List[str]:
    """
    Insert the default templates whose titles do not exist yet.

    Templates need an author, so when ``created_by`` is not given the oldest
    admin is used; without any admin nothing is seeded.

    Returns:
        Titles of the templates created
    """
    if created_by is None:
        admin = UserRepository(db).first_admin()
        if admin is None:
            logger.info("No admin account yet, skipping template seeding")
            return []
        created_by = admin.id

    workouts = WorkoutRepository(db)
    existing = workouts.template_titles()
    created = []

    for template in templates or DEFAULT_TEMPLATES:
        if template["title"] in existing:
            continue
        workouts.create_workout(
            title=template["title"],
            objective=template["objective"],
            created_by=created_by,
            is_template=True,
            items=template["items"],
        )
        created.append(template["title"])

    if created:
        logger.info(f"Seeded {len(created)} workout templates")
    return created
