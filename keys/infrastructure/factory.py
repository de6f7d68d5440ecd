"""
Construction of the configured key store and lifecycle engine.

Reads the ``KEY_AUTH`` settings dictionary. The in-memory store is a
process-wide singleton so every request sees the same keys.
"""
import logging
from functools import lru_cache

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from core.domain.value_objects import PolicyMode
from keys.domain.services import DEFAULT_KEY_GENERATION_ATTEMPTS, KeyLifecycleEngine
from keys.infrastructure.repositories.django_key_store import DjangoKeyStore
from keys.infrastructure.repositories.in_memory_key_store import InMemoryKeyStore
from keys.ports.key_store import KeyStore

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("django", "memory")


def _key_auth_setting(name: str, default=None):
    return getattr(settings, "KEY_AUTH", {}).get(name, default)


def get_policy_mode() -> PolicyMode:
    """Return the configured policy mode."""
    value = _key_auth_setting("POLICY_MODE", PolicyMode.FIXED_DATE.value)
    try:
        return PolicyMode(value)
    except ValueError:
        raise ImproperlyConfigured(
            f"KEY_AUTH['POLICY_MODE'] must be one of "
            f"{[mode.value for mode in PolicyMode]}, got {value!r}"
        ) from None


@lru_cache(maxsize=None)
def _in_memory_store(lock_timeout: float) -> InMemoryKeyStore:
    logger.warning(
        "Using the in-memory key store: all keys are lost when the process restarts"
    )
    return InMemoryKeyStore(lock_timeout=lock_timeout)


def get_key_store() -> KeyStore:
    """
    Return the configured key store.

    Raises:
        ImproperlyConfigured: If the backend name is unknown
    """
    backend = _key_auth_setting("STORE_BACKEND", "django")
    lock_timeout = float(_key_auth_setting("STORE_LOCK_TIMEOUT", 5.0))
    if backend == "django":
        return DjangoKeyStore(lock_timeout=lock_timeout)
    if backend == "memory":
        return _in_memory_store(lock_timeout)
    raise ImproperlyConfigured(
        f"KEY_AUTH['STORE_BACKEND'] must be one of {STORE_BACKENDS}, got {backend!r}"
    )


def reset_in_memory_store() -> None:
    """Drop the in-memory singleton (used by tests)."""
    _in_memory_store.cache_clear()


def build_engine() -> KeyLifecycleEngine:
    """Build a lifecycle engine from settings."""
    return KeyLifecycleEngine(
        store=get_key_store(),
        mode=get_policy_mode(),
        key_generation_attempts=int(
            _key_auth_setting("KEY_GENERATION_ATTEMPTS", DEFAULT_KEY_GENERATION_ATTEMPTS)
        ),
    )
