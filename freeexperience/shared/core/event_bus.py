# 📄 File: freeexperience/shared/core/event_bus.py
#
# 🧭 Purpose (Layman Explanation):
# A notice board: when someone signs in or out, the news is pinned here and everyone
# who cares about it, like the "who is logged in" tracker, gets told.
#
# 🧪 Purpose (Technical Summary):
# In-process event bus delivering identity-provider events (sign-in, sign-out, token
# refresh) to subscribed handlers without coupling them to the backend that produced
# the event.
#
# 🔗 Dependencies:
# abc, dataclasses, logging
#
# 🔄 Connected Modules / Calls From:
# AppContext, SessionResolver, AuthService, identity events, health check

import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar
from uuid import uuid4

logger = logging.getLogger(__name__)

T = TypeVar('T', bound='DomainEvent')


@dataclass
class DomainEvent:
    """
    Base class for all domain events.
    Events represent something that happened in the domain.
    """
    event_type: str
    aggregate_id: Optional[str] = None
    user_id: Optional[str] = None
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        data = asdict(self)
        data['timestamp'] = self.timestamp.isoformat()
        return data


class EventHandler(ABC, Generic[T]):
    """
    Abstract base class for event handlers.
    Each handler processes specific types of domain events.
    """

    @property
    @abstractmethod
    def event_types(self) -> List[str]:
        """Event types this handler processes."""
        pass

    @abstractmethod
    async def handle(self, event: T) -> None:
        """
        Handle the domain event.

        Args:
            event: Domain event to handle
        """
        pass

    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler can process the event."""
        return event.event_type in self.event_types

    async def on_error(self, event: T, error: Exception):
        """Handle errors during event processing."""
        logger.error(f"Error handling event {event.event_id}: {error}", exc_info=True)


class EventBus:
    """
    In-process event bus.

    ``publish`` awaits every subscribed handler in subscription order, so
    by the time it returns all reactions to the event have run. A failing
    handler is reported through its ``on_error`` hook and does not stop
    the remaining handlers.
    """

    def __init__(self):
        self.subscriptions: Dict[str, List[EventHandler]] = {}
        self._stats = {
            "published": 0,
            "processed": 0,
            "failed": 0,
        }

    def subscribe(self, handler: EventHandler, event_type: Optional[str] = None):
        """
        Subscribe handler to one event type, or to all its declared types.

        Args:
            handler: Event handler instance
            event_type: Event type to subscribe to (uses handler.event_types if None)
        """
        event_types = [event_type] if event_type else list(handler.event_types)

        for name in event_types:
            handlers = self.subscriptions.setdefault(name, [])
            if handler not in handlers:
                handlers.append(handler)
            logger.info(f"Handler {handler.__class__.__name__} subscribed to {name}")

    def unsubscribe(self, handler: EventHandler, event_type: Optional[str] = None):
        """
        Unsubscribe handler from event type.

        Args:
            handler: Event handler instance
            event_type: Event type to unsubscribe from (all declared types if None)
        """
        event_types = [event_type] if event_type else list(handler.event_types)

        for name in event_types:
            if name in self.subscriptions:
                self.subscriptions[name] = [
                    h for h in self.subscriptions[name] if h is not handler
                ]
                if not self.subscriptions[name]:
                    del self.subscriptions[name]

        logger.info(f"Handler {handler.__class__.__name__} unsubscribed")

    async def publish(self, event: DomainEvent):
        """
        Publish event and run every subscribed handler.

        Args:
            event: Domain event to publish
        """
        self._stats["published"] += 1
        handlers = list(self.subscriptions.get(event.event_type, []))

        if not handlers:
            logger.debug(f"No handlers for event type: {event.event_type}")
            return

        logger.info(f"Event published: {event.event_type} - {event.event_id}")

        for handler in handlers:
            try:
                await handler.handle(event)
                self._stats["processed"] += 1
            except Exception as e:
                self._stats["failed"] += 1
                await handler.on_error(event, e)

    def get_stats(self) -> Dict[str, Any]:
        """Get event bus statistics."""
        return {
            **self._stats,
            "subscription_count": sum(len(subs) for subs in self.subscriptions.values()),
            "event_types": list(self.subscriptions.keys())
        }
