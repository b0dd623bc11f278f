"""Tests for ChallengeService - daily/weekly windows and completion toggling."""

from datetime import datetime, timezone

import pytest

from ape_gym.exceptions import ChallengeNotFoundError, UserNotFoundError, ValidationError
from ape_gym.services.challenge_service import ChallengeService
from ape_gym.utils.timeutils import period_key, utc_day_key, utc_week_key


# Wednesday
WEDNESDAY = datetime(2024, 5, 8, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def service(db):
    return ChallengeService(db)


class TestPeriodKeys:
    """Tests for the window keys."""

    def test_day_key_is_utc_midnight(self):
        assert utc_day_key(WEDNESDAY) == "2024-05-08T00:00:00.000Z"

    def test_week_key_is_monday(self):
        assert utc_week_key(WEDNESDAY) == "2024-05-06T00:00:00.000Z"

    def test_week_key_on_sunday_and_monday(self):
        sunday = datetime(2024, 5, 12, 23, 59, tzinfo=timezone.utc)
        monday = datetime(2024, 5, 13, 0, 0, tzinfo=timezone.utc)

        assert utc_week_key(sunday) == "2024-05-06T00:00:00.000Z"
        assert utc_week_key(monday) == "2024-05-13T00:00:00.000Z"

    def test_period_key_by_frequency(self):
        assert period_key("daily", WEDNESDAY) == "2024-05-08T00:00:00.000Z"
        assert period_key("weekly", WEDNESDAY) == "2024-05-06T00:00:00.000Z"


class TestCreateChallenge:
    """Tests for challenge validation."""

    def test_rejects_inverted_window(self, service, admin):
        with pytest.raises(ValidationError):
            service.create_challenge(
                admin.id, "Bad", "daily",
                active_from="2024-06-01T00:00:00.000Z",
                active_to="2024-05-01T00:00:00.000Z",
            )

    def test_rejects_negative_points(self, service, admin):
        with pytest.raises(ValidationError):
            service.create_challenge(admin.id, "Bad", "daily", points=-1)

    def test_rejects_unknown_target_user(self, service, admin):
        with pytest.raises(UserNotFoundError):
            service.create_challenge(
                admin.id, "Solo", "daily", user_id="00000000-0000-4000-8000-000000000000"
            )


class TestCompletion:
    """Tests for completing and un-completing challenges."""

    def test_complete_twice_same_day_is_idempotent(self, service, admin, student):
        challenge = service.create_challenge(admin.id, "Water", "daily", points=5)

        first = service.set_completed(student.id, challenge.id, now=WEDNESDAY)
        later = WEDNESDAY.replace(hour=22)
        second = service.set_completed(student.id, challenge.id, now=later)

        assert first.key == second.key == "2024-05-08T00:00:00.000Z"
        assert first.changed is True
        assert second.changed is False
        board = service.leaderboard(now=later)
        assert board[0].points == 5

    def test_next_day_is_a_new_window(self, service, admin, student):
        challenge = service.create_challenge(admin.id, "Water", "daily", points=5)
        service.set_completed(student.id, challenge.id, now=WEDNESDAY)

        thursday = datetime(2024, 5, 9, 8, 0, tzinfo=timezone.utc)
        listing = service.list_for_user(student.id, now=thursday)

        assert listing["challenges"][0]["completed"] is False
        result = service.set_completed(student.id, challenge.id, now=thursday)
        assert result.changed is True

    def test_weekly_completion_counts_for_whole_week(self, service, admin, student):
        challenge = service.create_challenge(admin.id, "Long run", "weekly", points=20)
        service.set_completed(student.id, challenge.id, now=WEDNESDAY)

        saturday = datetime(2024, 5, 11, 9, 0, tzinfo=timezone.utc)
        listing = service.list_for_user(student.id, now=saturday)

        assert listing["period"] == {
            "dayKey": "2024-05-11T00:00:00.000Z",
            "weekKey": "2024-05-06T00:00:00.000Z",
        }
        assert listing["challenges"][0]["completed"] is True

    def test_uncomplete_removes_credit(self, service, admin, student):
        challenge = service.create_challenge(admin.id, "Water", "daily", points=5)
        service.set_completed(student.id, challenge.id, now=WEDNESDAY)

        result = service.set_completed(student.id, challenge.id, completed=False, now=WEDNESDAY)

        assert result.completed is False
        assert result.changed is True
        assert service.leaderboard(now=WEDNESDAY)[0].points == 0
        listing = service.list_for_user(student.id, now=WEDNESDAY)
        assert listing["challenges"][0]["completed"] is False

    def test_uncomplete_when_not_completed_is_noop(self, service, admin, student):
        challenge = service.create_challenge(admin.id, "Water", "daily", points=5)

        result = service.set_completed(student.id, challenge.id, completed=False, now=WEDNESDAY)

        assert result.changed is False

    def test_other_students_challenge_not_found(self, service, admin, make_user):
        ana = make_user("aluno")
        bia = make_user("aluno")
        challenge = service.create_challenge(admin.id, "Ana only", "daily", user_id=ana.id)

        with pytest.raises(ChallengeNotFoundError):
            service.set_completed(bia.id, challenge.id, now=WEDNESDAY)


class TestLeaderboardWindow:
    """Tests for the rolling leaderboard window."""

    def test_completions_older_than_window_ignored(self, service, admin, student):
        challenge = service.create_challenge(admin.id, "Water", "daily", points=5)
        service.set_completed(student.id, challenge.id, now=WEDNESDAY)

        nine_days_later = datetime(2024, 5, 17, 15, 30, tzinfo=timezone.utc)

        assert service.leaderboard(now=nine_days_later)[0].points == 0
