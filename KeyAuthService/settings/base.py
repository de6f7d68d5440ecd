"""
Base Django settings for KeyAuthService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-k3y-auth-7q!v$0c9w@x2m#n8r^b5t&l1z*f4h(d6j)s"
)

ALLOWED_HOSTS = [host for host in os.environ.get("ALLOWED_HOSTS", "").split(",") if host]

# Shared secret for the admin API (X-Admin-Secret header).
# Admin requests are rejected while it is unset.
ADMIN_SECRET = os.environ.get("ADMIN_SECRET", "")

# Key lifecycle configuration
KEY_AUTH = {
    # fixed_date: optional lifetime in days from creation
    # duration: day/week/month/lifetime counted from first use, device-bound
    "POLICY_MODE": os.environ.get("KEY_AUTH_POLICY_MODE", "fixed_date"),
    # django: persistent, database-backed; memory: process-local, lost on restart
    "STORE_BACKEND": os.environ.get("KEY_AUTH_STORE_BACKEND", "django"),
    # Seconds to wait for a per-key lock before failing with STORE_TIMEOUT
    "STORE_LOCK_TIMEOUT": float(os.environ.get("KEY_AUTH_STORE_LOCK_TIMEOUT", "5")),
    "KEY_GENERATION_ATTEMPTS": int(os.environ.get("KEY_AUTH_KEY_GENERATION_ATTEMPTS", "5")),
}

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "KeyAuthService.apps.KeyAuthServiceConfig",
    "core",
    "keys",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Custom middleware
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.auth.AdminSecretMiddleware",
]

# Admin routes have no trailing slash.
APPEND_SLASH = False

ROOT_URLCONF = "KeyAuthService.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "KeyAuthService.wsgi.application"
ASGI_APPLICATION = "KeyAuthService.asgi.application"

# Database
# https://docs.djangoproject.com/en/4.2/ref/settings/#databases
if os.environ.get("DB_ENGINE", "sqlite") == "postgresql":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.environ.get("DB_NAME", "key_auth"),
            "USER": os.environ.get("DB_USER", "postgres"),
            "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
            "HOST": os.environ.get("DB_HOST", "localhost"),
            "PORT": os.environ.get("DB_PORT", "5432"),
            "OPTIONS": {
                "connect_timeout": 10,
            },
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": os.environ.get("DB_NAME", str(BASE_DIR / "db.sqlite3")),
            "OPTIONS": {
                "timeout": 20,
                # BEGIN IMMEDIATE takes the write lock up front, so a key update
                # waits for the previous one instead of failing at commit.
                "transaction_mode": "IMMEDIATE",
            },
        }
    }

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "KeyAuth Service API",
    "DESCRIPTION": (
        "Issues, verifies and revokes activation keys. "
        "Admin endpoints require the X-Admin-Secret header."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api",
    "TAGS": [
        {"name": "Admin API", "description": "Key issuance and management"},
        {"name": "Client API", "description": "Key verification and activation"},
    ],
}

# Observability
LOGGING = get_logging_config(ENVIRONMENT)
