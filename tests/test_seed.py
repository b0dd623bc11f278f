"""Tests for startup seeding of the admin account and default templates."""

from ape_gym.db.repositories.user_repository import UserRepository
from ape_gym.db.repositories.workout_repository import WorkoutRepository
from ape_gym.db.seed import (
    DEFAULT_ADMIN_NAME,
    DEFAULT_TEMPLATES,
    seed_admin,
    seed_workout_templates,
)
from ape_gym.services.auth_service import verify_password


class TestSeedAdmin:
    """Tests for seed_admin."""

    def test_creates_admin(self, db):
        admin = seed_admin(db, " Admin@ApeGym.local ", "admin123")

        assert admin.role == "admin"
        assert admin.name == DEFAULT_ADMIN_NAME
        assert admin.email == "admin@apegym.local"
        assert verify_password("admin123", admin.password_hash)

    def test_existing_email_left_alone(self, db):
        first = seed_admin(db, "admin@apegym.local", "admin123")

        assert seed_admin(db, "admin@apegym.local", "other-pass") is None
        stored = UserRepository(db).get_by_id(first.id)
        assert verify_password("admin123", stored.password_hash)
        assert UserRepository(db).count("admin") == 1


class TestSeedTemplates:
    """Tests for seed_workout_templates."""

    def test_skipped_without_admin(self, db):
        assert seed_workout_templates(db) == []
        assert WorkoutRepository(db).template_titles() == set()

    def test_seeds_defaults_with_items(self, db, admin):
        created = seed_workout_templates(db)

        assert created == [t["title"] for t in DEFAULT_TEMPLATES]
        repo = WorkoutRepository(db)
        templates = repo.list_all()
        assert all(t.is_template and t.user_id is None for t in templates)
        assert all(t.created_by == admin.id for t in templates)
        for template in templates:
            assert len(repo.get_items(template.id)) == 5

    def test_second_run_is_noop(self, db, admin):
        seed_workout_templates(db)

        assert seed_workout_templates(db) == []
        assert len(WorkoutRepository(db).list_all()) == len(DEFAULT_TEMPLATES)

    def test_custom_templates_and_author(self, db, professor):
        templates = [{"title": "Mobilidade", "objective": "Mobilidade", "items": []}]

        assert seed_workout_templates(db, created_by=professor.id, templates=templates) == ["Mobilidade"]
