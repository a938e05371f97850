"""Tests for the event bus and the cached views it invalidates."""

from core.events import INVENTORY_CHANGED, MOVEMENTS_CHANGED, PRODUCTS_CHANGED, EventBus
from services.views import HISTORY, PRODUCT_LIST, STOCK_SUMMARY, STOCK_TABLE, ViewCache


def counting_loader(calls, value):
    async def _load():
        calls.append(value)
        return value

    return _load


class TestEventBus:
    def test_publish_reaches_topic_subscribers_only(self):
        bus = EventBus()
        seen = []
        bus.subscribe(INVENTORY_CHANGED, lambda topic, payload: seen.append((topic, payload)))
        bus.subscribe(PRODUCTS_CHANGED, lambda topic, payload: seen.append(("wrong", payload)))

        bus.publish(INVENTORY_CHANGED, inventory_id=1)

        assert seen == [(INVENTORY_CHANGED, {"inventory_id": 1})]

    def test_unsubscribe(self):
        bus = EventBus()
        seen = []
        unsubscribe = bus.subscribe(MOVEMENTS_CHANGED, lambda topic, payload: seen.append(topic))

        unsubscribe()
        bus.publish(MOVEMENTS_CHANGED)

        assert seen == []

    def test_failing_handler_does_not_stop_the_others(self):
        bus = EventBus()
        seen = []

        def broken(topic, payload):
            raise RuntimeError("boom")

        bus.subscribe(INVENTORY_CHANGED, broken)
        bus.subscribe(INVENTORY_CHANGED, lambda topic, payload: seen.append(topic))

        bus.publish(INVENTORY_CHANGED, inventory_id=1)

        assert seen == [INVENTORY_CHANGED]


class TestViewCache:
    async def test_loader_runs_once_until_invalidated(self):
        bus = EventBus()
        cache = ViewCache(bus)
        calls = []

        assert await cache.get(STOCK_TABLE, counting_loader(calls, "v1")) == "v1"
        assert await cache.get(STOCK_TABLE, counting_loader(calls, "v2")) == "v1"
        assert calls == ["v1"]

        bus.publish(INVENTORY_CHANGED, inventory_id=1)

        assert await cache.get(STOCK_TABLE, counting_loader(calls, "v3")) == "v3"

    async def test_invalidation_during_load_is_not_lost(self):
        bus = EventBus()
        cache = ViewCache(bus)

        async def load_then_write():
            # the read finished before a movement committed
            bus.publish(INVENTORY_CHANGED, inventory_id=1)
            return "quantity=5"

        assert await cache.get(STOCK_TABLE, load_then_write) == "quantity=5"
        assert STOCK_TABLE not in cache

        calls = []
        assert await cache.get(STOCK_TABLE, counting_loader(calls, "quantity=15")) == "quantity=15"
        assert calls == ["quantity=15"]
        assert STOCK_TABLE in cache

    async def test_only_dependent_views_are_dropped(self):
        bus = EventBus()
        cache = ViewCache(bus)
        for name in (STOCK_TABLE, STOCK_SUMMARY, PRODUCT_LIST, HISTORY):
            await cache.get(name, counting_loader([], name))

        bus.publish(MOVEMENTS_CHANGED, inventory_id=1)
        assert HISTORY not in cache
        assert STOCK_TABLE in cache

        bus.publish(PRODUCTS_CHANGED, product_id=1)
        assert PRODUCT_LIST not in cache
        assert STOCK_SUMMARY not in cache
        assert STOCK_TABLE in cache

    async def test_clear(self):
        cache = ViewCache(EventBus())
        await cache.get(HISTORY, counting_loader([], 1))
        cache.clear()
        assert HISTORY not in cache
