"""In-process change notifications.

Writers publish a topic after their transaction commits; views subscribe
and drop whatever they cached for that topic.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

PRODUCTS_CHANGED = "products.changed"
INVENTORY_CHANGED = "inventory.changed"
MOVEMENTS_CHANGED = "movements.changed"

Handler = Callable[[str, Dict[str, Any]], None]


class EventBus:
    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: Handler) -> Callable[[], None]:
        """Register ``handler`` for ``topic`` and return an unsubscribe callable."""
        self._handlers[topic].append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers[topic]:
                self._handlers[topic].remove(handler)

        return _unsubscribe

    def publish(self, topic: str, **payload: Any) -> None:
        handlers = list(self._handlers.get(topic, ()))
        logger.debug("publish %s", topic, extra={"subscribers": len(handlers)})
        for handler in handlers:
            try:
                handler(topic, payload)
            except Exception:
                # the write has already committed; a broken subscriber must not fail it
                logger.exception("subscriber failed for %s", topic)


event_bus = EventBus()
