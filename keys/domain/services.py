"""
Key domain services.

The lifecycle engine holds every rule for creating, revoking, listing
and verifying keys. It depends only on the KeyStore port, so any
backend honouring the port's atomic ``update`` gets the same behaviour.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from core.domain.exceptions import (
    DeviceMismatchError,
    DuplicateKeyError,
    InvalidKeyError,
    KeyExpiredError,
    KeyGenerationError,
    KeyNotFoundError,
    KeyRevokedError,
    KeyValidationError,
    MissingDeviceIdError,
    MissingKeyError,
)
from core.domain.value_objects import KeyPolicy, KeyStatus, PolicyMode
from keys.domain.key_record import (
    MAX_EXPIRES_IN_DAYS,
    MAX_NAME_LENGTH,
    KeyRecord,
    generate_key,
)
from keys.ports.key_store import KeyStore

logger = logging.getLogger(__name__)

DEFAULT_KEY_GENERATION_ATTEMPTS = 5

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class KeyRecordView:
    """A stored record decorated with its derived state."""

    record: KeyRecord
    expired: bool
    status: KeyStatus


@dataclass(frozen=True)
class VerifyResult:
    """
    Client-facing outcome of a successful verification.

    Never carries the device identifier.
    """

    name: str
    uses: int
    expires_at: Optional[datetime]
    type: Optional[str] = None
    device_name: Optional[str] = None
    activated: bool = False


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class KeyLifecycleEngine:
    """
    Domain service implementing the key lifecycle state machine.

    The policy mode is fixed per deployment: ``FIXED_DATE`` keys take an
    optional lifetime in days at creation, ``DURATION`` keys take a
    duration class and bind to the first device that verifies them.
    """

    def __init__(
        self,
        store: KeyStore,
        mode: PolicyMode = PolicyMode.FIXED_DATE,
        clock: Clock = utc_now,
        key_generation_attempts: int = DEFAULT_KEY_GENERATION_ATTEMPTS,
        key_generator: Callable[[], str] = generate_key,
    ):
        """
        Initialize the engine.

        Args:
            store: Key store implementation
            mode: Policy variant for this deployment
            clock: Callable returning the current aware datetime
            key_generation_attempts: Attempts before giving up on a unique key
            key_generator: Callable producing candidate key strings
        """
        if key_generation_attempts < 1:
            raise ValueError("key_generation_attempts must be at least 1")
        self.store = store
        self.mode = mode
        self._clock = clock
        self._attempts = key_generation_attempts
        self._generate_key = key_generator

    def now(self) -> datetime:
        return self._clock()

    async def create(
        self,
        name: str,
        expires_in_days: Optional[int] = None,
        duration: Optional[str] = None,
    ) -> KeyRecord:
        """
        Mint a new key.

        Args:
            name: Human-readable label
            expires_in_days: Lifetime in days (fixed-date mode)
            duration: Duration class name (duration mode)

        Returns:
            The stored KeyRecord, including the plaintext key

        Raises:
            KeyValidationError: If the name or policy input is invalid
            KeyGenerationError: If no unique key could be generated
        """
        name = (name or "").strip()
        if not name:
            raise KeyValidationError("name is required")
        if len(name) > MAX_NAME_LENGTH:
            raise KeyValidationError(f"name must be at most {MAX_NAME_LENGTH} characters")

        policy = self._resolve_policy(expires_in_days, duration)

        for attempt in range(1, self._attempts + 1):
            created_at = self.now()
            expires_at = None
            if policy is KeyPolicy.FIXED_DATE:
                try:
                    expires_at = created_at + timedelta(days=expires_in_days)
                except OverflowError:
                    raise KeyValidationError(
                        f"expires_in_days must be at most {MAX_EXPIRES_IN_DAYS}"
                    ) from None

            record = KeyRecord.create(
                name=name,
                policy=policy,
                created_at=created_at,
                expires_at=expires_at,
                key=self._generate_key(),
            )
            try:
                return await self.store.create(record)
            except DuplicateKeyError:
                logger.warning(
                    "Generated key collided with an existing key (attempt %d/%d)",
                    attempt,
                    self._attempts,
                )

        raise KeyGenerationError(
            f"Could not generate a unique key after {self._attempts} attempts"
        )

    def _resolve_policy(
        self, expires_in_days: Optional[int], duration: Optional[str]
    ) -> KeyPolicy:
        if self.mode is PolicyMode.FIXED_DATE:
            # A missing or non-positive lifetime means the key never expires.
            if expires_in_days is not None and expires_in_days > 0:
                if expires_in_days > MAX_EXPIRES_IN_DAYS:
                    raise KeyValidationError(
                        f"expires_in_days must be at most {MAX_EXPIRES_IN_DAYS}"
                    )
                return KeyPolicy.FIXED_DATE
            return KeyPolicy.UNSET
        if not duration or not duration.strip():
            raise KeyValidationError("duration is required (day, week, month or lifetime)")
        try:
            return KeyPolicy.parse_duration(duration)
        except ValueError:
            raise KeyValidationError(
                f"Invalid duration {duration!r}; expected day, week, month or lifetime"
            ) from None

    async def revoke(self, key: str) -> KeyRecord:
        """
        Permanently deactivate a key. Revoking a revoked key succeeds.

        Raises:
            KeyNotFoundError: If the key does not exist
        """
        return await self.store.update(key, lambda record: record.revoke())

    async def delete(self, key: str) -> None:
        """
        Permanently remove a key.

        Raises:
            KeyNotFoundError: If the key does not exist
        """
        await self.store.delete(key)

    async def list(self) -> List[KeyRecordView]:
        """
        List all keys newest first, with derived expired/status fields.

        Returns:
            List of KeyRecordView
        """
        now = self.now()
        records = await self.store.list_all()
        return [
            KeyRecordView(record=record, expired=record.is_expired(now), status=record.status(now))
            for record in records
        ]

    async def count(self) -> int:
        return await self.store.count()

    async def verify(
        self,
        key: Optional[str],
        device_id: Optional[str] = None,
        device_name: Optional[str] = None,
    ) -> VerifyResult:
        """
        Validate a presented key and record the use.

        The whole check-and-record step runs inside one atomic store
        update, so concurrent first uses of the same key bind exactly
        one device.

        Args:
            key: Presented key
            device_id: Identifier of the calling device
            device_name: Display name of the calling device

        Returns:
            VerifyResult for the client

        Raises:
            MissingKeyError: No key given
            MissingDeviceIdError: Device id required but not given
            InvalidKeyError: Key unknown
            KeyRevokedError: Key revoked
            DeviceMismatchError: Key bound to another device
            KeyExpiredError: Key expired
        """
        key = _clean(key)
        if key is None:
            raise MissingKeyError()

        device_id = _clean(device_id)
        if self.mode is PolicyMode.DURATION and device_id is None:
            raise MissingDeviceIdError()

        activation = {"activated": False}

        def transition(record: KeyRecord) -> KeyRecord:
            activation["activated"] = False
            now = self.now()
            if not record.active:
                raise KeyRevokedError()

            if not record.policy.is_duration_class:
                if record.is_expired(now):
                    raise KeyExpiredError()
                return record.mark_used(now)

            if record.activated_at is not None:
                if record.device_id != device_id:
                    raise DeviceMismatchError(device_name=record.device_name)
                if record.is_expired(now):
                    raise KeyExpiredError()
                return record.mark_used(now)

            if device_id is None:
                raise MissingDeviceIdError()
            activation["activated"] = True
            return record.activate(device_id, device_name, now).mark_used(now)

        try:
            record = await self.store.update(key, transition)
        except KeyNotFoundError:
            raise InvalidKeyError() from None

        device_bound = record.policy.is_duration_class
        return VerifyResult(
            name=record.name,
            uses=record.uses,
            expires_at=record.expires_at,
            type=record.policy.value if device_bound else None,
            device_name=record.device_name if device_bound else None,
            activated=activation["activated"],
        )
