"""
Event handlers for domain events.

These handlers process domain events for side effects such as
audit logging.
"""

import logging

from core.domain.events import DomainEvent, EventHandler
from keys.domain.events import (
    KeyActivated,
    KeyCreated,
    KeyDeleted,
    KeyRevoked,
    KeyVerificationRejected,
    KeyVerified,
)

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("keys.audit")

AUDITED_EVENTS = (
    KeyCreated,
    KeyRevoked,
    KeyDeleted,
    KeyActivated,
    KeyVerified,
    KeyVerificationRejected,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes one structured log line per key event.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        audit_logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={"event": event.to_dict()},
        )


_audit_handler = AuditLogEventHandler()


def register_event_handlers(bus=None):
    """
    Register all event handlers with the event bus.

    Safe to call more than once; a handler is subscribed only once.
    """
    if bus is None:
        from core.infrastructure.events import event_bus as bus

    for event_type in AUDITED_EVENTS:
        bus.subscribe(event_type, _audit_handler)

    logger.info("Event handlers registered")
