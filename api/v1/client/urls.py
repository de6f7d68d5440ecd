"""
URL configuration for client API endpoints.
"""

from django.urls import path

from api.v1.client import views

app_name = "client-api"

urlpatterns = [
    path("verify", views.VerifyKeyView.as_view(), name="verify-key"),
]
