"""
Key domain events.

Domain events represent something that happened to a key. Events carry
only a key prefix, never the full bearer key.
"""

from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


def key_prefix(key: str) -> str:
    """Return the loggable prefix of a key."""
    return f"{key[:8]}..." if key else ""


class KeyCreated(DomainEvent):
    """Event raised when a key is minted."""

    payload_fields = ("name", "policy", "expires_at")

    def __init__(
        self,
        key: str,
        name: str,
        policy: str,
        expires_at: Optional[datetime] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=key_prefix(key), occurred_at=occurred_at)
        self.name = name
        self.policy = policy
        self.expires_at = expires_at


class KeyRevoked(DomainEvent):
    """Event raised when a key is revoked."""

    def __init__(self, key: str, occurred_at: Optional[datetime] = None):
        super().__init__(aggregate_id=key_prefix(key), occurred_at=occurred_at)


class KeyDeleted(DomainEvent):
    """Event raised when a key is deleted."""

    def __init__(self, key: str, occurred_at: Optional[datetime] = None):
        super().__init__(aggregate_id=key_prefix(key), occurred_at=occurred_at)


class KeyActivated(DomainEvent):
    """Event raised when a duration key is bound to its first device."""

    payload_fields = ("device_name", "expires_at")

    def __init__(
        self,
        key: str,
        device_name: Optional[str],
        expires_at: Optional[datetime],
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=key_prefix(key), occurred_at=occurred_at)
        self.device_name = device_name
        self.expires_at = expires_at


class KeyVerified(DomainEvent):
    """Event raised on every successful verification."""

    payload_fields = ("uses",)

    def __init__(self, key: str, uses: int, occurred_at: Optional[datetime] = None):
        super().__init__(aggregate_id=key_prefix(key), occurred_at=occurred_at)
        self.uses = uses


class KeyVerificationRejected(DomainEvent):
    """Event raised when a verification is rejected."""

    payload_fields = ("reason",)

    def __init__(self, key: str, reason: str, occurred_at: Optional[datetime] = None):
        super().__init__(aggregate_id=key_prefix(key), occurred_at=occurred_at)
        self.reason = reason
