"""
VerifyKeyHandler.

Handler for client key verification.
"""

import logging

from core.domain.events import EventBus
from core.domain.exceptions import VerificationRejected
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import key_activations_total, key_verifications_total
from keys.application.commands.verify_key import VerifyKeyCommand
from keys.application.dto.key_dto import VerifiedKeyDTO, VerifyKeyResponseDTO
from keys.domain.events import KeyActivated, KeyVerificationRejected, KeyVerified
from keys.domain.services import KeyLifecycleEngine

logger = logging.getLogger(__name__)


class VerifyKeyHandler:
    """Handler for VerifyKeyCommand."""

    def __init__(self, engine: KeyLifecycleEngine, event_bus: EventBus = None):
        """Initialize handler with the lifecycle engine."""
        self.engine = engine
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: VerifyKeyCommand) -> VerifyKeyResponseDTO:
        """
        Handle verify key command.

        Args:
            command: VerifyKeyCommand

        Returns:
            VerifyKeyResponseDTO for the client

        Raises:
            VerificationRejected: Subclass naming the rejection reason
        """
        try:
            result = await self.engine.verify(
                key=command.key,
                device_id=command.device_id,
                device_name=command.device_name,
            )
        except VerificationRejected as e:
            key_verifications_total.labels(outcome=e.code.lower()).inc()
            logger.info(
                "Key verification rejected: %s (key=%s...)",
                e.code,
                (command.key or "")[:8],
            )
            await self.event_bus.publish(
                KeyVerificationRejected(key=command.key or "", reason=e.code)
            )
            raise

        key_verifications_total.labels(outcome="success").inc()
        if result.activated:
            key_activations_total.labels(policy=result.type).inc()
            await self.event_bus.publish(
                KeyActivated(
                    key=command.key,
                    device_name=result.device_name,
                    expires_at=result.expires_at,
                )
            )
        await self.event_bus.publish(KeyVerified(key=command.key, uses=result.uses))

        return VerifyKeyResponseDTO(
            success=True,
            message="Key is valid",
            user=VerifiedKeyDTO(
                name=result.name,
                uses=result.uses,
                expires_at=result.expires_at,
                type=result.type,
                device_name=result.device_name,
            ),
        )
