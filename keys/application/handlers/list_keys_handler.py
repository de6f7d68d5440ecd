"""
ListKeysHandler.

Handler for the admin key listing.
"""

from keys.application.dto.key_dto import KeyListDTO, KeyListItemDTO
from keys.application.queries.list_keys import ListKeysQuery
from keys.domain.services import KeyLifecycleEngine


class ListKeysHandler:
    """Handler for ListKeysQuery."""

    def __init__(self, engine: KeyLifecycleEngine):
        """Initialize handler with the lifecycle engine."""
        self.engine = engine

    async def handle(self, query: ListKeysQuery) -> KeyListDTO:
        """
        Handle list keys query.

        Args:
            query: ListKeysQuery

        Returns:
            KeyListDTO ordered by creation time, newest first
        """
        views = await self.engine.list()
        items = [
            KeyListItemDTO(
                key=view.record.key,
                name=view.record.name,
                active=view.record.active,
                policy=view.record.policy.value,
                status=view.status.value,
                expired=view.expired,
                uses=view.record.uses,
                created_at=view.record.created_at,
                last_used_at=view.record.last_used_at,
                activated_at=view.record.activated_at,
                expires_at=view.record.expires_at,
                device_id=view.record.device_id,
                device_name=view.record.device_name,
            )
            for view in views
        ]
        return KeyListDTO(total=len(items), keys=items)
