import asyncio
from typing import Any, Callable, Dict, List, Optional, Set

from pydantic import BaseModel

from app.core.config import settings
from app.shared.utils import logger

# Payload keys worth repeating when a handler fails
_ID_KEYS = ("user_id", "content_id", "submitter_id")


class EventBus:
    """In-process pub/sub. Handler failures are logged and never reach the publisher."""

    def __init__(self, handler_timeout: float = 5.0):
        self.subscriptions: Dict[str, List[Callable]] = {}
        self.untimed: Set[Callable] = set()
        self.handler_timeout = handler_timeout
        self.log = logger.get_logger("event_bus")

    async def publish(self, event_name: str, event_data: Any):
        if isinstance(event_data, BaseModel):
            event_data = event_data.model_dump(mode="json")
        handlers = self.subscriptions.get(event_name, [])
        if not handlers:
            self.log.debug(f"No handlers for {event_name}")
            return
        await asyncio.gather(*(self._run_handler(h, event_data) for h in handlers))

    async def _run_handler(self, handler: Callable, event_data: Any):
        call = (
            handler(event_data)
            if asyncio.iscoroutinefunction(handler)
            else asyncio.to_thread(handler, event_data)
        )
        timeout = None if handler in self.untimed else self.handler_timeout
        try:
            await asyncio.wait_for(call, timeout=timeout)
        except asyncio.TimeoutError:
            self.log.error(
                f"Handler timed out after {timeout}s: {handler.__name__} ({_describe(event_data)})"
            )
        except Exception as e:
            self.log.error(f"Error in event handler {handler.__name__} ({_describe(event_data)}): {e}")

    def subscribe(self, event_name: str, handler: Callable[[Any], None], timeout: bool = True):
        """``timeout=False`` lets a long-running handler finish instead of being cancelled midway."""
        if not timeout:
            self.untimed.add(handler)
        handlers = self.subscriptions.setdefault(event_name, [])
        if handler in handlers:
            return
        handlers.append(handler)
        self.log.debug(f"Subscribed {handler.__name__} to: {event_name}")

    def unsubscribe(self, event_name: str, handler: Optional[Callable] = None):
        if handler is None:
            for h in self.subscriptions.pop(event_name, []):
                self.untimed.discard(h)
            return
        handlers = self.subscriptions.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)
            self.untimed.discard(handler)


def _describe(event_data: Any) -> str:
    if not isinstance(event_data, dict):
        return "no ids"
    ids = [f"{key}={event_data[key]}" for key in _ID_KEYS if event_data.get(key)]
    return ", ".join(ids) or "no ids"


event_bus = EventBus(handler_timeout=settings.EVENT_HANDLER_TIMEOUT)
