# SPDX-License-Identifier: Apache-2.0

"""
Event publishing towards the notification collaborator.

The core publishes DomainEvent objects; subscribers decide how (and
whether) to turn them into toasts or emails.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional
from opentelemetry import trace

from ..models.enums import EventType
from ..models.events import DomainEvent

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


@dataclass
class PublishResult:
    """Outcome of delivering one event to every subscriber."""
    event: DomainEvent
    delivered: int = 0
    failed: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed


class EventPublisher:
    """Synchronous in-process publisher with subscribable handlers."""

    def __init__(self):
        self._handlers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        """Register a handler receiving every published event."""
        self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def emit(
        self,
        event_type: EventType,
        entity,
        data: Optional[dict] = None
    ) -> PublishResult:
        """Build an event about an entity and publish it."""
        event = DomainEvent(
            event_type=event_type,
            entity_id=entity.id,
            entity_type=entity.entity_type,
            data=data or {}
        )
        return self.publish(event)

    def publish(self, event: DomainEvent) -> PublishResult:
        """
        Deliver an event to all handlers.

        A failing handler is logged and skipped; the remaining handlers
        still receive the event.
        """
        with tracer.start_as_current_span("events.publish") as span:
            span.set_attributes({
                "event.type": event.event_type,
                "event.entity_id": event.entity_id
            })

            result = PublishResult(event=event)
            for handler in list(self._handlers):
                try:
                    handler(event)
                    result.delivered += 1
                except Exception as e:
                    handler_name = getattr(handler, "__name__", type(handler).__name__)
                    result.failed.append(handler_name)
                    logger.error(
                        f"Event handler {handler_name} failed: {e}",
                        exc_info=True,
                        extra={"event_type": event.event_type, "entity_id": event.entity_id}
                    )

            span.set_attribute("event.delivered", result.delivered)
            logger.debug(
                f"Published {event.event_type} for {event.entity_type} {event.entity_id}",
                extra={"delivered": result.delivered, "failed": len(result.failed)}
            )
            return result


class EventRecorder:
    """Handler keeping published events in memory."""

    def __init__(self):
        self.events: List[DomainEvent] = []

    def __call__(self, event: DomainEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: EventType) -> List[DomainEvent]:
        return [event for event in self.events if event.event_type == event_type]

    def clear(self) -> None:
        self.events.clear()
