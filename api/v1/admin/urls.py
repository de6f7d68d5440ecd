"""
URL configuration for admin API endpoints.
"""

from django.urls import path

from api.v1.admin import views

app_name = "admin-api"

urlpatterns = [
    path("create-key", views.CreateKeyView.as_view(), name="create-key"),
    path("keys", views.ListKeysView.as_view(), name="list-keys"),
    path("revoke-key", views.RevokeKeyView.as_view(), name="revoke-key"),
    path("delete-key", views.DeleteKeyView.as_view(), name="delete-key"),
]
