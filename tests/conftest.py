"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.domain.value_objects import KeyPolicy, PolicyMode
from core.infrastructure.event_handlers import AuditLogEventHandler
from core.infrastructure.events import InMemoryEventBus
from keys.domain.key_record import KeyRecord
from keys.domain.services import KeyLifecycleEngine
from keys.infrastructure.factory import reset_in_memory_store
from keys.infrastructure.repositories.django_key_store import DjangoKeyStore
from keys.infrastructure.repositories.in_memory_key_store import InMemoryKeyStore

ADMIN_SECRET = "test-admin-secret"


class FakeClock:
    """Adjustable clock for driving expiry in tests."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


class RecordingEventHandler:
    """Event handler that remembers every event it receives."""

    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)


@pytest.fixture
def clock():
    """Fixture for an adjustable clock starting at a fixed instant."""
    return FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def memory_store():
    """Fixture for a fresh InMemoryKeyStore."""
    return InMemoryKeyStore(lock_timeout=1.0)


@pytest.fixture
def django_store():
    """Fixture for DjangoKeyStore."""
    return DjangoKeyStore(lock_timeout=1.0)


@pytest.fixture
def fixed_engine(memory_store, clock):
    """Fixture for an engine in fixed-date mode."""
    return KeyLifecycleEngine(store=memory_store, mode=PolicyMode.FIXED_DATE, clock=clock)


@pytest.fixture
def duration_engine(memory_store, clock):
    """Fixture for an engine in duration mode."""
    return KeyLifecycleEngine(store=memory_store, mode=PolicyMode.DURATION, clock=clock)


@pytest.fixture
def sample_record(clock):
    """Fixture for a sample unused duration-class KeyRecord."""
    return KeyRecord.create(name="Alice", policy=KeyPolicy.WEEK, created_at=clock())


@pytest.fixture
def event_bus():
    """Fixture for an isolated event bus with a recording subscriber."""
    from keys.domain.events import (
        KeyActivated,
        KeyCreated,
        KeyDeleted,
        KeyRevoked,
        KeyVerificationRejected,
        KeyVerified,
    )

    bus = InMemoryEventBus()
    recorder = RecordingEventHandler()
    for event_type in (
        KeyCreated,
        KeyRevoked,
        KeyDeleted,
        KeyActivated,
        KeyVerified,
        KeyVerificationRejected,
    ):
        bus.subscribe(event_type, recorder)
        bus.subscribe(event_type, AuditLogEventHandler())
    bus.recorder = recorder
    return bus


@pytest.fixture(autouse=True)
def _fresh_in_memory_store():
    """Never share the process-wide in-memory store between tests."""
    reset_in_memory_store()
    yield
    reset_in_memory_store()


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_client():
    """Fixture for a separate DRF API client carrying the admin secret."""
    from rest_framework.test import APIClient

    client = APIClient()
    client.credentials(HTTP_X_ADMIN_SECRET=ADMIN_SECRET)
    return client


@pytest.fixture
def duration_mode(settings):
    """Switch the HTTP stack to duration mode."""
    settings.KEY_AUTH = {**settings.KEY_AUTH, "POLICY_MODE": "duration"}
    return settings
