# app/domains/moderation/publisher.py
from datetime import datetime
from typing import Optional, Union

from app.core import event_bus
from app.core.config import EventsTransport, settings
from app.core.redis import append_to_stream
from app.shared.schemas.events import ContentApproved, ContentRejected
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

ModerationEvent = Union[ContentApproved, ContentRejected]


class ModerationEventPublisher:
    """
    Publishes disposition events.

    ``local`` hands them to the in-process bus, where subscriber failures are
    logged and dropped. ``redis`` appends to a stream synchronously, so a
    failed XADD is raised to the caller.
    """

    def __init__(self, transport: Optional[EventsTransport] = None, stream: Optional[str] = None):
        self.transport = transport or settings.EVENTS_TRANSPORT
        self.stream = stream or settings.MODERATION_EVENTS_STREAM

    async def publish_approved(self, content_id: str, reviewer_id: str) -> ContentApproved:
        event = ContentApproved(
            content_id=content_id, reviewer_id=reviewer_id, timestamp=datetime.utcnow()
        )
        await self._publish(event)
        return event

    async def publish_rejected(
        self, content_id: str, reviewer_id: str, reason: Optional[str]
    ) -> ContentRejected:
        event = ContentRejected(
            content_id=content_id,
            reviewer_id=reviewer_id,
            reason=reason,
            timestamp=datetime.utcnow(),
        )
        await self._publish(event)
        return event

    async def _publish(self, event: ModerationEvent):
        logger.info(f"Publishing {event.event} via {self.transport.value}: content_id={event.content_id}")
        if self.transport == EventsTransport.REDIS:
            try:
                await append_to_stream(
                    self.stream, {"event": event.event, "payload": event.model_dump_json()}
                )
            except Exception as e:
                logger.error(f"Failed to publish {event.event} for content {event.content_id}: {e}")
                raise
        else:
            await event_bus.event_bus.publish(event.event, event)
        logger.debug(f"Published {event.event} for content {event.content_id}")


moderation_publisher = ModerationEventPublisher()
