"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from datetime import timedelta
from enum import Enum
from typing import Optional


class PolicyMode(Enum):
    """
    Deployment-wide expiry policy variant.

    FIXED_DATE keys expire a number of days after creation.
    DURATION keys start their clock on first verification and bind
    to the verifying device.
    """

    FIXED_DATE = "fixed_date"
    DURATION = "duration"

    def __str__(self) -> str:
        """Return mode as string."""
        return self.value


class KeyPolicy(Enum):
    """Expiry policy carried by a single key."""

    UNSET = "unset"
    FIXED_DATE = "fixed_date"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    LIFETIME = "lifetime"

    def __str__(self) -> str:
        """Return policy as string."""
        return self.value

    @classmethod
    def duration_classes(cls):
        """Policies whose expiry starts at activation."""
        return (cls.DAY, cls.WEEK, cls.MONTH, cls.LIFETIME)

    @classmethod
    def parse_duration(cls, value: str) -> "KeyPolicy":
        """
        Parse a duration class name.

        Args:
            value: One of day, week, month, lifetime (case-insensitive)

        Returns:
            Matching KeyPolicy

        Raises:
            ValueError: If the name is not a duration class
        """
        try:
            policy = cls((value or "").strip().lower())
        except ValueError:
            raise ValueError(f"Unknown duration: {value!r}") from None
        if policy not in cls.duration_classes():
            raise ValueError(f"Unknown duration: {value!r}")
        return policy

    @property
    def is_duration_class(self) -> bool:
        return self in self.duration_classes()

    @property
    def duration(self) -> Optional[timedelta]:
        """Offset from activation to expiry; None when the key never expires."""
        return _DURATIONS.get(self)


_DURATIONS = {
    KeyPolicy.DAY: timedelta(days=1),
    KeyPolicy.WEEK: timedelta(days=7),
    KeyPolicy.MONTH: timedelta(days=30),
}


class KeyStatus(Enum):
    """Derived lifecycle status of a key."""

    UNUSED = "unused"
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value
