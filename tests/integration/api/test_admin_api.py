"""
Integration tests for Admin API endpoints.
"""

import pytest
from django.urls import reverse

from keys.infrastructure.models import KeyRecord as KeyRecordModel


def _create(client, **body):
    return client.post(reverse("admin-api:create-key"), body, format="json")


@pytest.mark.django_db
@pytest.mark.integration
class TestAdminAuthentication:
    """Admin routes require the shared secret."""

    @pytest.mark.parametrize(
        "method,route",
        [
            ("post", "admin-api:create-key"),
            ("get", "admin-api:list-keys"),
            ("patch", "admin-api:revoke-key"),
            ("delete", "admin-api:delete-key"),
        ],
    )
    def test_missing_secret(self, api_client, method, route):
        """Test requests without the secret are rejected."""
        response = getattr(api_client, method)(reverse(route), {}, format="json")

        assert response.status_code == 401
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "UNAUTHORIZED"

    def test_wrong_secret(self, api_client):
        """Test a wrong secret is rejected before anything is stored."""
        api_client.credentials(HTTP_X_ADMIN_SECRET="wrong")

        response = _create(api_client, name="Alice")

        assert response.status_code == 401
        assert KeyRecordModel.objects.count() == 0

    def test_unconfigured_secret(self, admin_client, settings):
        """Test admin routes stay closed when no secret is configured."""
        settings.ADMIN_SECRET = ""

        response = admin_client.get(reverse("admin-api:list-keys"))

        assert response.status_code == 401


@pytest.mark.django_db
@pytest.mark.integration
class TestCreateKeyAPI:
    """Integration tests for key creation."""

    def test_create_fixed_date(self, admin_client):
        """Test creating a key with a lifetime."""
        response = _create(admin_client, name="  Alice  ", expires_in_days=30)

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["key"].startswith("sk-")
        assert data["name"] == "Alice"
        assert data["policy"] == "fixed_date"
        assert data["expires_at"] is not None
        assert data["created_at"] is not None
        assert KeyRecordModel.objects.filter(key=data["key"]).exists()

    def test_create_without_expiry(self, admin_client):
        """Test creating a key that never expires."""
        response = _create(admin_client, name="Alice")

        assert response.status_code == 201
        assert response.json()["expires_at"] is None

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "   "}])
    def test_create_requires_name(self, admin_client, body):
        """Test blank or missing names are rejected."""
        response = _create(admin_client, **body)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "VALIDATION_ERROR"

    def test_create_rejects_bad_days(self, admin_client):
        """Test a non-integer lifetime is rejected."""
        response = _create(admin_client, name="Alice", expires_in_days="soon")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize("days", [10**8, 10**12])
    def test_create_rejects_out_of_range_days(self, admin_client, days):
        """Test lifetimes past the supported range are rejected, not a server error."""
        response = _create(admin_client, name="Alice", expires_in_days=days)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert not KeyRecordModel.objects.exists()

    def test_create_duration(self, admin_client, duration_mode):
        """Test creating a duration key in duration mode."""
        response = _create(admin_client, name="Alice", duration="week")

        assert response.status_code == 201
        data = response.json()
        assert data["policy"] == "week"
        assert data["expires_at"] is None

    @pytest.mark.parametrize("duration", [None, "year"])
    def test_create_duration_invalid(self, admin_client, duration_mode, duration):
        """Test duration mode requires a known duration class."""
        body = {"name": "Alice"}
        if duration is not None:
            body["duration"] = duration

        response = _create(admin_client, **body)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.django_db
@pytest.mark.integration
class TestKeyManagementAPI:
    """Integration tests for list, revoke and delete."""

    def test_list_keys(self, admin_client):
        """Test listing returns every key with derived fields."""
        first = _create(admin_client, name="first").json()
        second = _create(admin_client, name="second").json()

        response = admin_client.get(reverse("admin-api:list-keys"))

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["total"] == 2
        assert {k["key"] for k in data["keys"]} == {first["key"], second["key"]}
        item = data["keys"][0]
        assert item["status"] == "unused"
        assert item["expired"] is False
        assert item["active"] is True
        assert item["uses"] == 0

    def test_revoke_key(self, admin_client, api_client):
        """Test revoking is idempotent and blocks verification."""
        key = _create(admin_client, name="Alice").json()["key"]
        url = reverse("admin-api:revoke-key")

        first = admin_client.patch(url, {"key": key}, format="json")
        second = admin_client.patch(url, {"key": key}, format="json")

        assert first.status_code == 200
        assert first.json() == {"success": True, "message": "Key revoked"}
        assert second.status_code == 200
        assert KeyRecordModel.objects.get(key=key).is_active is False

        listing = admin_client.get(reverse("admin-api:list-keys")).json()
        assert listing["keys"][0]["status"] == "revoked"

    def test_revoke_unknown_key(self, admin_client):
        """Test revoking an unknown key."""
        response = admin_client.patch(
            reverse("admin-api:revoke-key"), {"key": "sk-missing"}, format="json"
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "KEY_NOT_FOUND"

    def test_revoke_requires_key(self, admin_client):
        """Test revoke without a key."""
        response = admin_client.patch(reverse("admin-api:revoke-key"), {}, format="json")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_delete_key(self, admin_client):
        """Test deleting a key."""
        key = _create(admin_client, name="Alice").json()["key"]
        url = reverse("admin-api:delete-key")

        response = admin_client.delete(url, {"key": key}, format="json")
        again = admin_client.delete(url, {"key": key}, format="json")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Key deleted"}
        assert again.status_code == 404
        assert not KeyRecordModel.objects.filter(key=key).exists()

    def test_in_memory_backend(self, admin_client, settings):
        """Test the API works the same on the in-memory store."""
        settings.KEY_AUTH = {**settings.KEY_AUTH, "STORE_BACKEND": "memory"}

        key = _create(admin_client, name="Alice").json()["key"]
        listing = admin_client.get(reverse("admin-api:list-keys")).json()

        assert [k["key"] for k in listing["keys"]] == [key]
        assert KeyRecordModel.objects.count() == 0
