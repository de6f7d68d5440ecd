"""
Unit tests for the KeyRecord entity.
"""

import re
from datetime import timedelta

import pytest

from core.domain.value_objects import KeyPolicy, KeyStatus
from keys.domain.key_record import UNKNOWN_DEVICE, KeyRecord, generate_key


class TestGenerateKey:
    """Tests for key generation."""

    def test_format(self):
        """Test keys are sk- followed by 48 hex characters."""
        assert re.fullmatch(r"sk-[0-9a-f]{48}", generate_key())

    def test_no_collisions(self):
        """Test 10,000 generated keys are distinct."""
        keys = {generate_key() for _ in range(10_000)}
        assert len(keys) == 10_000


class TestKeyRecord:
    """Tests for KeyRecord entity."""

    def test_create(self, clock):
        """Test creating a fresh record."""
        record = KeyRecord.create(name="Alice", policy=KeyPolicy.UNSET, created_at=clock())

        assert record.key.startswith("sk-")
        assert record.active is True
        assert record.uses == 0
        assert record.created_at == clock()
        assert record.last_used_at is None
        assert record.activated_at is None
        assert record.expires_at is None
        assert record.device_id is None

    def test_empty_name_rejected(self, clock):
        """Test blank names cannot be stored."""
        with pytest.raises(ValueError, match="name cannot be empty"):
            KeyRecord.create(name="   ", policy=KeyPolicy.UNSET, created_at=clock())

    def test_negative_uses_rejected(self, clock):
        """Test the use count cannot go negative."""
        with pytest.raises(ValueError):
            KeyRecord(
                key="sk-abc",
                name="Alice",
                active=True,
                policy=KeyPolicy.UNSET,
                uses=-1,
                created_at=clock(),
            )

    def test_expiry_is_strictly_after(self, clock):
        """Test a key is still valid at exactly its expiry instant."""
        record = KeyRecord.create(
            name="Alice",
            policy=KeyPolicy.FIXED_DATE,
            created_at=clock(),
            expires_at=clock() + timedelta(days=1),
        )

        assert record.is_expired(clock() + timedelta(days=1)) is False
        assert record.is_expired(clock() + timedelta(days=1, microseconds=1)) is True

    def test_activate_sets_expiry_from_activation(self, sample_record, clock):
        """Test activation starts the duration clock."""
        now = clock.advance(days=3)
        activated = sample_record.activate("device-a", "Laptop", now)

        assert activated.activated_at == now
        assert activated.expires_at == now + timedelta(days=7)
        assert activated.device_id == "device-a"
        assert activated.device_name == "Laptop"
        assert sample_record.activated_at is None

    def test_activate_lifetime_never_expires(self, clock):
        """Test lifetime keys have no expiry after activation."""
        record = KeyRecord.create(name="Bob", policy=KeyPolicy.LIFETIME, created_at=clock())
        activated = record.activate("device-a", None, clock())

        assert activated.expires_at is None
        assert activated.device_name == UNKNOWN_DEVICE

    def test_activate_blank_device_name(self, sample_record, clock):
        """Test blank device names fall back to the placeholder."""
        activated = sample_record.activate("device-a", "   ", clock())
        assert activated.device_name == UNKNOWN_DEVICE

    def test_activate_twice_rejected(self, sample_record, clock):
        """Test a bound key cannot be re-activated."""
        activated = sample_record.activate("device-a", "Laptop", clock())
        with pytest.raises(ValueError, match="already activated"):
            activated.activate("device-b", "Phone", clock())

    def test_mark_used(self, clock):
        """Test a use is counted and stamped."""
        record = KeyRecord.create(name="Alice", policy=KeyPolicy.UNSET, created_at=clock())
        now = clock.advance(hours=1)
        used = record.mark_used(now).mark_used(now)

        assert used.uses == 2
        assert used.last_used_at == now
        assert used.activated_at == now

    def test_revoke_idempotent(self, sample_record):
        """Test revoking twice yields the same inactive record."""
        revoked = sample_record.revoke()

        assert revoked.active is False
        assert revoked.revoke() is revoked

    def test_status(self, sample_record, clock):
        """Test derived status, revoked taking precedence over expired."""
        assert sample_record.status(clock()) is KeyStatus.UNUSED

        activated = sample_record.activate("device-a", None, clock())
        assert activated.status(clock()) is KeyStatus.ACTIVE

        later = clock() + timedelta(days=8)
        assert activated.status(later) is KeyStatus.EXPIRED
        assert activated.revoke().status(later) is KeyStatus.REVOKED
