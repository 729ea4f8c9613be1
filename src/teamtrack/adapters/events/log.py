"""Event publishers that do not need a message broker."""

import structlog

from teamtrack.core.events import DomainEvent
from teamtrack.core.interfaces import EventPublisher

logger = structlog.get_logger()


class LoggingEventPublisher:
    """Publishes domain events to the structured log."""

    async def publish(self, event: DomainEvent) -> None:
        """Log the event with all of its fields.

        Args:
            event: The event to publish.
        """
        payload = event.to_dict()
        event_type = payload.pop("type")
        logger.info("domain_event", event_type=event_type, **payload)


class RecordingEventPublisher:
    """Keeps published events in memory, in publication order.

    Attributes:
        events: Every event published so far.
    """

    def __init__(self) -> None:
        """Initialize with no recorded events."""
        self.events: list[DomainEvent] = []

    async def publish(self, event: DomainEvent) -> None:
        """Record the event."""
        self.events.append(event)

    def of_type(self, event_type: type[DomainEvent]) -> list[DomainEvent]:
        """Recorded events of a given class."""
        return [event for event in self.events if isinstance(event, event_type)]

    def clear(self) -> None:
        """Forget every recorded event."""
        self.events.clear()


# Verify we implement the protocol
_logging: EventPublisher = LoggingEventPublisher()
_recording: EventPublisher = RecordingEventPublisher()
