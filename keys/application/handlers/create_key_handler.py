"""
CreateKeyHandler.

Handler for minting keys.
"""

import logging

from core.domain.events import EventBus
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import keys_created_total
from keys.application.commands.create_key import CreateKeyCommand
from keys.application.dto.key_dto import CreatedKeyDTO
from keys.domain.events import KeyCreated
from keys.domain.services import KeyLifecycleEngine

logger = logging.getLogger(__name__)


class CreateKeyHandler:
    """Handler for CreateKeyCommand."""

    def __init__(self, engine: KeyLifecycleEngine, event_bus: EventBus = None):
        """Initialize handler with the lifecycle engine."""
        self.engine = engine
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: CreateKeyCommand) -> CreatedKeyDTO:
        """
        Handle create key command.

        Args:
            command: CreateKeyCommand

        Returns:
            CreatedKeyDTO with the plaintext key

        Raises:
            KeyValidationError: If the name or policy input is invalid
            KeyGenerationError: If no unique key could be generated
        """
        record = await self.engine.create(
            name=command.name,
            expires_in_days=command.expires_in_days,
            duration=command.duration,
        )

        keys_created_total.labels(policy=record.policy.value).inc()
        logger.info(
            "Key created: %s... (policy=%s)",
            record.key[:8],
            record.policy.value,
        )

        await self.event_bus.publish(
            KeyCreated(
                key=record.key,
                name=record.name,
                policy=record.policy.value,
                expires_at=record.expires_at,
            )
        )

        return CreatedKeyDTO(
            key=record.key,
            name=record.name,
            policy=record.policy.value,
            expires_at=record.expires_at,
            created_at=record.created_at,
        )
