"""
Integration tests for user endpoints.

Tests registration, validation, partial updates, deletion and the
per-user measurement and results views.
"""

from uuid import uuid4

from carefit.db.errors import INSUFFICIENT_PRIVILEGE, StoreError
from carefit.services.user_service import UserService

USER_JSON = {
    "lastName": "Suzuki",
    "firstName": "Taro",
    "gender": "male",
    "birthDate": "1938-11-02",
    "medicalHistory": ["Stroke"],
}


def _create_measurement(client, user_id, measurement_date, **fields):
    response = client.post(
        "/api/v1/measurements",
        json={"userId": str(user_id), "measurementDate": measurement_date, **fields},
    )
    assert response.status_code == 201
    return response.json()


class TestCreateUser:
    """Tests for POST /api/v1/users."""

    def test_create_user(self, client):
        """Returns 201 with the camelCase record."""
        response = client.post("/api/v1/users", json=USER_JSON)

        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["lastName"] == "Suzuki"
        assert data["birthDate"] == "1938-11-02"
        assert data["medicalHistory"] == ["Stroke"]
        assert data["createdAt"]
        assert data["updatedAt"]

    def test_medical_history_optional(self, client):
        payload = {k: v for k, v in USER_JSON.items() if k != "medicalHistory"}
        response = client.post("/api/v1/users", json=payload)

        assert response.status_code == 201
        assert response.json()["medicalHistory"] == []

    def test_missing_birth_date(self, client):
        """Returns 400 and stores nothing."""
        payload = {k: v for k, v in USER_JSON.items() if k != "birthDate"}
        response = client.post("/api/v1/users", json=payload)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Missing required fields"
        assert any(d["field"] == "birthDate" for d in data["details"])
        assert client.get("/api/v1/users").json() == []

    def test_blank_name_rejected(self, client):
        response = client.post("/api/v1/users", json={**USER_JSON, "lastName": "  "})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_malformed_json(self, client):
        response = client.post(
            "/api/v1/users",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Malformed JSON body"

    def test_permission_denied_maps_to_403(self, client, monkeypatch):
        def _deny(self, payload):
            raise StoreError(
                INSUFFICIENT_PRIVILEGE, "new row violates row-level security policy"
            )

        monkeypatch.setattr(UserService, "create", _deny)
        response = client.post("/api/v1/users", json=USER_JSON)

        assert response.status_code == 403
        data = response.json()
        assert data["code"] == INSUFFICIENT_PRIVILEGE
        assert "row-level security" in data["details"]


class TestGetUsers:
    """Tests for GET /api/v1/users and /api/v1/users/{id}."""

    def test_list_users(self, client, sample_user):
        response = client.get("/api/v1/users")

        assert response.status_code == 200
        assert [u["id"] for u in response.json()] == [str(sample_user["id"])]

    def test_get_user(self, client, sample_user):
        response = client.get(f"/api/v1/users/{sample_user['id']}")

        assert response.status_code == 200
        assert response.json()["firstName"] == "Hanako"

    def test_get_unknown_user(self, client):
        """Returns 404 with an error message."""
        response = client.get(f"/api/v1/users/{uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    def test_malformed_id(self, client):
        response = client.get("/api/v1/users/not-a-uuid")
        assert response.status_code == 400

    def test_responses_not_cached(self, client):
        response = client.get("/api/v1/users")
        assert "no-store" in response.headers["Cache-Control"]
        assert response.headers["Pragma"] == "no-cache"
        assert response.headers["Expires"] == "0"


class TestUpdateUser:
    """Tests for PUT /api/v1/users/{id}."""

    def test_partial_update(self, client, sample_user):
        response = client.put(
            f"/api/v1/users/{sample_user['id']}", json={"gender": "other"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["gender"] == "other"
        assert data["lastName"] == "Tanaka"
        assert data["medicalHistory"] == ["Hypertension", "Diabetes"]

    def test_update_unknown_user(self, client):
        response = client.put(f"/api/v1/users/{uuid4()}", json={"gender": "other"})
        assert response.status_code == 404

    def test_null_birth_date_rejected(self, client, sample_user):
        response = client.put(
            f"/api/v1/users/{sample_user['id']}", json={"birthDate": None}
        )
        assert response.status_code == 400


class TestDeleteUser:
    """Tests for DELETE /api/v1/users/{id}."""

    def test_delete_user(self, client, sample_user):
        response = client.delete(f"/api/v1/users/{sample_user['id']}")

        assert response.status_code == 204
        assert response.content == b""
        assert client.get(f"/api/v1/users/{sample_user['id']}").status_code == 404

    def test_delete_unknown_user(self, client):
        response = client.delete(f"/api/v1/users/{uuid4()}")
        assert response.status_code == 404


class TestUserMeasurements:
    """Tests for GET /api/v1/users/{id}/measurements."""

    def test_full_history_newest_first(self, client, sample_user):
        for visit_date in ("2024-01-10", "2024-03-10", "2024-02-10"):
            _create_measurement(client, sample_user["id"], visit_date)

        response = client.get(f"/api/v1/users/{sample_user['id']}/measurements")

        assert response.status_code == 200
        assert [m["measurementDate"] for m in response.json()] == [
            "2024-03-10",
            "2024-02-10",
            "2024-01-10",
        ]

    def test_latest_visits_oldest_first(self, client, sample_user):
        for visit_date in ("2024-01-10", "2024-03-10", "2024-02-10"):
            _create_measurement(client, sample_user["id"], visit_date)

        response = client.get(
            f"/api/v1/users/{sample_user['id']}/measurements",
            params={"latest": "true", "limit": 2},
        )

        assert response.status_code == 200
        assert [m["measurementDate"] for m in response.json()] == [
            "2024-02-10",
            "2024-03-10",
        ]

    def test_latest_default_limit(self, client, sample_user):
        for month in range(1, 7):
            _create_measurement(client, sample_user["id"], f"2024-0{month}-01")

        response = client.get(
            f"/api/v1/users/{sample_user['id']}/measurements",
            params={"latest": "true"},
        )
        assert len(response.json()) == 4

    def test_large_limit_accepted(self, client, sample_user):
        """The window has no upper bound; it returns every visit there is."""
        for visit_date in ("2024-01-10", "2024-02-10"):
            _create_measurement(client, sample_user["id"], visit_date)

        response = client.get(
            f"/api/v1/users/{sample_user['id']}/measurements",
            params={"latest": "true", "limit": 200},
        )

        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_invalid_limit(self, client, sample_user):
        response = client.get(
            f"/api/v1/users/{sample_user['id']}/measurements",
            params={"latest": "true", "limit": 0},
        )
        assert response.status_code == 400


class TestUserResults:
    """Tests for GET /api/v1/users/{id}/results."""

    def test_results_view(self, client, sample_user):
        _create_measurement(
            client, sample_user["id"], "2024-01-10", height=150, weight=45, bi=70
        )
        _create_measurement(
            client, sample_user["id"], "2024-04-10", height=150, weight=46, bi=75
        )

        response = client.get(f"/api/v1/users/{sample_user['id']}/results")

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["name"] == "Tanaka Hanako"
        assert [v["label"] for v in data["visits"]] == ["2024/1/10", "2024/4/10"]
        assert data["chart"]["labels"] == ["2024/1/10", "2024/4/10"]
        bmi = next(row for row in data["rows"] if row["key"] == "bmi")
        assert bmi["values"] == ["20.00", "20.44"]

    def test_results_unknown_user(self, client):
        response = client.get(f"/api/v1/users/{uuid4()}/results")
        assert response.status_code == 404
