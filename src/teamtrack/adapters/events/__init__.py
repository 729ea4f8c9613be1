"""Domain event publishers."""

from teamtrack.adapters.events.log import LoggingEventPublisher, RecordingEventPublisher

__all__ = ["LoggingEventPublisher", "RecordingEventPublisher"]
