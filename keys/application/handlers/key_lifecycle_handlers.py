"""
Key lifecycle handlers.

Handlers for revoke and delete key commands.
"""

from core.domain.events import EventBus
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import keys_deleted_total, keys_revoked_total
from keys.application.commands.delete_key import DeleteKeyCommand
from keys.application.commands.revoke_key import RevokeKeyCommand
from keys.domain.events import KeyDeleted, KeyRevoked
from keys.domain.services import KeyLifecycleEngine


class RevokeKeyHandler:
    """Handler for RevokeKeyCommand."""

    def __init__(self, engine: KeyLifecycleEngine, event_bus: EventBus = None):
        """Initialize handler with the lifecycle engine."""
        self.engine = engine
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: RevokeKeyCommand):
        """
        Handle revoke key command.

        Args:
            command: RevokeKeyCommand

        Returns:
            Revoked KeyRecord entity

        Raises:
            KeyNotFoundError: If key not found
        """
        revoked = await self.engine.revoke(command.key)

        keys_revoked_total.inc()
        await self.event_bus.publish(KeyRevoked(key=command.key))

        return revoked


class DeleteKeyHandler:
    """Handler for DeleteKeyCommand."""

    def __init__(self, engine: KeyLifecycleEngine, event_bus: EventBus = None):
        """Initialize handler with the lifecycle engine."""
        self.engine = engine
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: DeleteKeyCommand) -> None:
        """
        Handle delete key command.

        Args:
            command: DeleteKeyCommand

        Raises:
            KeyNotFoundError: If key not found
        """
        await self.engine.delete(command.key)

        keys_deleted_total.inc()
        await self.event_bus.publish(KeyDeleted(key=command.key))
