"""
Tests for logging exercises and reading them back.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from exercise_tracker.db.schema import new_object_id
from exercise_tracker.main import create_app
from exercise_tracker.parsing import to_date_string


class TestAddExercise:
    """POST /api/users/:_id/exercises"""

    def test_add_exercise(self, client, make_user):
        user = make_user("fcc_test")

        response = client.post(
            f"/api/users/{user['_id']}/exercises",
            json={"description": "test run", "duration": "30", "date": "2023-06-15"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "_id": user["_id"],
            "username": "fcc_test",
            "description": "test run",
            "duration": 30,
            "date": "Thu Jun 15 2023",
        }

    def test_add_exercise_from_form(self, client, make_user):
        user = make_user()

        response = client.post(
            f"/api/users/{user['_id']}/exercises",
            data={"description": "swim", "duration": "45", "date": "2024-01-01"},
        )

        assert response.status_code == 200
        assert response.json()["duration"] == 45
        assert response.json()["date"] == "Mon Jan 01 2024"

    def test_date_defaults_to_today(self, client, make_user, add_exercise):
        user = make_user()

        response = add_exercise(user["_id"])

        assert response.status_code == 200
        today = datetime.now(timezone.utc).date()
        assert response.json()["date"] == to_date_string(today)

    def test_empty_date_defaults_to_today(self, client, make_user, add_exercise):
        user = make_user()

        response = add_exercise(user["_id"], date="")

        assert response.status_code == 200
        today = datetime.now(timezone.utc).date()
        assert response.json()["date"] == to_date_string(today)

    def test_datetime_keeps_calendar_date(self, client, make_user, add_exercise):
        user = make_user()

        response = add_exercise(user["_id"], date="2023-06-15T08:30:00")

        assert response.json()["date"] == "Thu Jun 15 2023"

    def test_early_years_are_zero_padded(self, client, make_user, add_exercise):
        user = make_user()

        response = add_exercise(user["_id"], date="0999-01-01")

        assert response.status_code == 200
        assert response.json()["date"] == "Tue Jan 01 0999"

    @pytest.mark.parametrize(
        "fields",
        [
            {"description": ""},
            {"description": None},
            {"duration": ""},
            {"duration": None},
        ],
    )
    def test_missing_fields(self, client, make_user, add_exercise, fields):
        user = make_user()

        response = add_exercise(user["_id"], **fields)

        assert response.status_code == 400
        assert response.json() == {"error": "Description and duration are required"}

    @pytest.mark.parametrize(
        "duration",
        ["abc", "30min", "1.5", "-5", 0, True, 2.5, "9" * 30, 2**31],
    )
    def test_invalid_duration(self, client, make_user, add_exercise, duration):
        user = make_user()

        response = add_exercise(user["_id"], duration=duration)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid duration"}

    @pytest.mark.parametrize("date", ["not a date", "2023-13-01", "15/06/2023", 20230615])
    def test_invalid_date(self, client, make_user, add_exercise, date):
        user = make_user()

        response = add_exercise(user["_id"], date=date)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid date"}

    @pytest.mark.parametrize(
        "user_id",
        [
            new_object_id(),
            "000000000000000000000000",
            "not-an-id",
            "1",
            "%20",
            "x" * 200,
        ],
    )
    def test_unknown_user(self, client, add_exercise, user_id):
        response = add_exercise(user_id)

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    def test_nothing_stored_for_unknown_user(self, client, make_user, add_exercise):
        user = make_user()
        add_exercise("missing")

        log = client.get(f"/api/users/{user['_id']}/logs").json()
        assert log["count"] == 0


class TestStoreFailure:
    def test_store_error_is_generic_500(self, client, make_user, monkeypatch):
        user = make_user()

        def broken_find(conn, user_id):
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        monkeypatch.setattr("exercise_tracker.api.users._find_user", broken_find)

        response = client.post(
            f"/api/users/{user['_id']}/exercises",
            json={"description": "run", "duration": 10},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Server error"}

    def test_unexpected_error_is_generic_500(self, settings, monkeypatch):
        def broken_parse(value):
            raise OverflowError("Python int too large to convert to SQLite INTEGER")

        monkeypatch.setattr("exercise_tracker.api.users.parse_duration", broken_parse)

        with TestClient(create_app(settings), raise_server_exceptions=False) as client:
            user = client.post("/api/users", json={"username": "overflow"}).json()
            response = client.post(
                f"/api/users/{user['_id']}/exercises",
                json={"description": "run", "duration": 10},
            )

        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"error": "Server error"}

    def test_unknown_route_uses_error_shape(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}


def test_end_to_end(client):
    created = client.post("/api/users", json={"username": "fcc_test"}).json()
    assert created["username"] == "fcc_test"
    user_id = created["_id"]

    added = client.post(
        f"/api/users/{user_id}/exercises",
        json={"description": "test run", "duration": "30", "date": "2023-06-15"},
    ).json()
    assert added == {
        "_id": user_id,
        "username": "fcc_test",
        "description": "test run",
        "duration": 30,
        "date": "Thu Jun 15 2023",
    }

    log = client.get(f"/api/users/{user_id}/logs").json()
    assert log == {
        "_id": user_id,
        "username": "fcc_test",
        "count": 1,
        "log": [{"description": "test run", "duration": 30, "date": "Thu Jun 15 2023"}],
    }
