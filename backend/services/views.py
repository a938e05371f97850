"""
Cached read views that are dropped when the data under them changes.

Routers ask the cache for a view by name and give it a loader; the loader
runs only when the view is missing. Subscriptions on the event bus clear the
affected views after every committed write.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Iterable

from core.events import INVENTORY_CHANGED, MOVEMENTS_CHANGED, PRODUCTS_CHANGED, EventBus, event_bus

logger = logging.getLogger(__name__)

STOCK_TABLE = "stock_table"
STOCK_SUMMARY = "stock_summary"
PRODUCT_LIST = "product_list"
HISTORY = "history"

# topic -> views computed from the data that topic covers
DEPENDENCIES: Dict[str, tuple] = {
    PRODUCTS_CHANGED: (PRODUCT_LIST, STOCK_SUMMARY),
    INVENTORY_CHANGED: (STOCK_TABLE, STOCK_SUMMARY),
    MOVEMENTS_CHANGED: (HISTORY,),
}


class ViewCache:
    def __init__(self, bus: EventBus = event_bus, dependencies: Dict[str, Iterable[str]] = DEPENDENCIES):
        self._views: Dict[str, Any] = {}
        # bumped on every invalidation; a load caches only if its generation is unchanged
        self._generations: Dict[str, int] = {}
        for topic, names in dependencies.items():
            bus.subscribe(topic, self._make_invalidator(tuple(names)))

    def _make_invalidator(self, names):
        def _invalidate(topic: str, payload: Dict[str, Any]) -> None:
            for name in names:
                self._views.pop(name, None)
                self._generations[name] = self._generations.get(name, 0) + 1
            logger.debug("views invalidated", extra={"topic": topic, "views": ",".join(names)})

        return _invalidate

    def __contains__(self, name: str) -> bool:
        return name in self._views

    async def get(self, name: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        if name in self._views:
            return self._views[name]
        generation = self._generations.get(name, 0)
        value = await loader()
        if self._generations.get(name, 0) == generation:
            self._views[name] = value
        else:
            logger.debug("discarded view invalidated during load", extra={"view": name})
        return value

    def clear(self) -> None:
        self._views.clear()


view_cache = ViewCache()
