"""
KeyRecord domain entity.

This is the core domain entity representing an issued key.
It contains the lifecycle transitions and is independent of infrastructure.
"""

import secrets
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from core.domain.value_objects import KeyPolicy, KeyStatus

KEY_PREFIX = "sk-"
KEY_RANDOM_BYTES = 24
MAX_NAME_LENGTH = 255
MAX_EXPIRES_IN_DAYS = 365 * 1000
UNKNOWN_DEVICE = "Unknown Device"


def generate_key() -> str:
    """
    Generate an opaque key: ``sk-`` followed by 48 hex characters.

    Returns:
        Generated key string
    """
    return KEY_PREFIX + secrets.token_hex(KEY_RANDOM_BYTES)


@dataclass(frozen=True)
class KeyRecord:
    """
    KeyRecord domain entity.

    Transition methods return new instances; a record is never
    mutated in place.
    """

    key: str
    name: str
    active: bool
    policy: KeyPolicy
    uses: int
    created_at: datetime
    last_used_at: Optional[datetime] = None
    activated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    device_id: Optional[str] = None
    device_name: Optional[str] = None

    def __post_init__(self):
        """Validate key record entity."""
        if not self.key or len(self.key.strip()) == 0:
            raise ValueError("Key cannot be empty")
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Key name cannot be empty")
        if self.uses < 0:
            raise ValueError("Use count cannot be negative")

    @classmethod
    def create(
        cls,
        name: str,
        policy: KeyPolicy,
        created_at: datetime,
        expires_at: Optional[datetime] = None,
        key: Optional[str] = None,
    ) -> "KeyRecord":
        """
        Create a new, unused KeyRecord.

        Args:
            name: Human-readable label
            policy: Expiry policy
            created_at: Creation time
            expires_at: Expiry time (fixed-date policy only)
            key: Key string (generated if not provided)

        Returns:
            KeyRecord entity instance
        """
        return cls(
            key=key or generate_key(),
            name=name,
            active=True,
            policy=policy,
            uses=0,
            created_at=created_at,
            expires_at=expires_at,
        )

    def is_expired(self, now: datetime) -> bool:
        """
        Check whether the key is past its expiry.

        Args:
            now: Current time

        Returns:
            True if an expiry is set and has passed
        """
        return self.expires_at is not None and now > self.expires_at

    def status(self, now: datetime) -> KeyStatus:
        """Derive the lifecycle status, revoked taking precedence over expired."""
        if not self.active:
            return KeyStatus.REVOKED
        if self.is_expired(now):
            return KeyStatus.EXPIRED
        if self.activated_at is not None:
            return KeyStatus.ACTIVE
        return KeyStatus.UNUSED

    def activate(
        self, device_id: str, device_name: Optional[str], now: datetime
    ) -> "KeyRecord":
        """
        Bind the key to a device and start its expiry clock.

        Args:
            device_id: Identifier of the activating device
            device_name: Display name of the device (optional)
            now: Activation time

        Returns:
            New KeyRecord instance bound to the device
        """
        if self.activated_at is not None:
            raise ValueError("Key is already activated")
        if not self.policy.is_duration_class:
            raise ValueError("Only duration keys can be activated on a device")

        duration: Optional[timedelta] = self.policy.duration
        device_name = (device_name or "").strip() or UNKNOWN_DEVICE
        return replace(
            self,
            activated_at=now,
            device_id=device_id,
            device_name=device_name,
            expires_at=now + duration if duration is not None else None,
        )

    def mark_used(self, now: datetime) -> "KeyRecord":
        """
        Record one successful verification.

        Args:
            now: Verification time

        Returns:
            New KeyRecord instance with the use counted
        """
        return replace(
            self,
            uses=self.uses + 1,
            last_used_at=now,
            activated_at=self.activated_at or now,
        )

    def revoke(self) -> "KeyRecord":
        """
        Create a new KeyRecord instance that is permanently inactive.

        Returns:
            New KeyRecord instance with active=False
        """
        if not self.active:
            return self
        return replace(self, active=False)
