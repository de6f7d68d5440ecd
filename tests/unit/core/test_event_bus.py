"""
Unit tests for the in-memory event bus and audit handler.
"""

import logging

import pytest

from core.domain.events import EventHandler
from core.infrastructure.event_handlers import AuditLogEventHandler, register_event_handlers
from core.infrastructure.events import InMemoryEventBus
from keys.domain.events import KeyCreated, KeyRevoked


class FailingHandler(EventHandler):
    async def handle(self, event):
        raise RuntimeError("boom")


class CollectingHandler(EventHandler):
    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)


class TestInMemoryEventBus:
    """Tests for InMemoryEventBus."""

    @pytest.mark.asyncio
    async def test_publish_to_subscribers(self):
        """Test events reach handlers of their own type only."""
        bus = InMemoryEventBus()
        handler = CollectingHandler()
        bus.subscribe(KeyRevoked, handler)

        await bus.publish(KeyRevoked(key="sk-0123456789"))
        await bus.publish(KeyCreated(key="sk-0123456789", name="Alice", policy="unset"))

        assert [e.event_type for e in handler.events] == ["KeyRevoked"]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_fail_publisher(self):
        """Test one broken subscriber does not stop the others."""
        bus = InMemoryEventBus()
        handler = CollectingHandler()
        bus.subscribe(KeyRevoked, FailingHandler())
        bus.subscribe(KeyRevoked, handler)

        await bus.publish(KeyRevoked(key="sk-0123456789"))

        assert len(handler.events) == 1

    def test_subscribe_is_idempotent(self):
        """Test registering handlers twice subscribes them once."""
        bus = InMemoryEventBus()

        register_event_handlers(bus)
        register_event_handlers(bus)

        assert len(bus._handlers[KeyCreated]) == 1


class TestAuditLogEventHandler:
    """Tests for AuditLogEventHandler."""

    @pytest.mark.asyncio
    async def test_writes_audit_line(self, caplog):
        """Test the audit line carries the event payload."""
        event = KeyCreated(key="sk-0123456789abcdef", name="Alice", policy="week")

        with caplog.at_level(logging.INFO, logger="keys.audit"):
            await AuditLogEventHandler().handle(event)

        record = caplog.records[-1]
        assert record.name == "keys.audit"
        assert record.event["event_type"] == "KeyCreated"
        assert record.event["aggregate_id"] == "sk-01234..."
        assert "sk-0123456789abcdef" not in record.getMessage()
