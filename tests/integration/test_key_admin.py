"""
Integration tests for the read-only key admin.
"""

import pytest
from django.contrib import admin
from django.urls import reverse

from keys.admin import KeyRecordAdmin
from keys.infrastructure.models import KeyRecord as KeyRecordModel


@pytest.fixture
def staff_client(client, admin_user):
    """Fixture for a Django test client logged in as a superuser."""
    client.force_login(admin_user)
    return client


@pytest.mark.django_db
@pytest.mark.integration
class TestKeyRecordAdmin:
    """Integration tests for KeyRecordAdmin."""

    def test_registered(self):
        """Test the key model is registered with the admin site."""
        assert isinstance(admin.site._registry[KeyRecordModel], KeyRecordAdmin)

    def test_changelist_shows_key_prefix(self, staff_client):
        """Test the listing shows keys without revealing them in full."""
        KeyRecordModel.objects.create(key="sk-" + "a" * 48, name="Alice")

        response = staff_client.get(reverse("admin:keys_keyrecord_changelist"))

        assert response.status_code == 200
        assert b"Alice" in response.content
        assert b"sk-aaaaa..." in response.content

    def test_read_only(self, rf, admin_user):
        """Test no add, change or delete permission is granted."""
        request = rf.get("/")
        request.user = admin_user
        model_admin = admin.site._registry[KeyRecordModel]

        assert model_admin.has_add_permission(request) is False
        assert model_admin.has_change_permission(request) is False
        assert model_admin.has_delete_permission(request) is False

    def test_add_view_forbidden(self, staff_client):
        """Test keys cannot be created through the admin."""
        response = staff_client.get(reverse("admin:keys_keyrecord_add"))

        assert response.status_code == 403
