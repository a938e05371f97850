"""Tests for product and colour creation."""

from uuid import uuid4

import pytest

from core.errors import DuplicateError, InvalidInputError, ProductNotFoundError
from core.events import INVENTORY_CHANGED, PRODUCTS_CHANGED
from services import catalog


class TestProducts:
    async def test_sku_is_upper_cased(self, product):
        assert product["sku"] == "TS-001"
        assert product["name"] == "Basic T-Shirt"
        assert product["created_at"] is not None

    async def test_duplicate_sku_any_case(self, access, bus, product):
        with pytest.raises(DuplicateError):
            await catalog.create_product(access, " Ts-001 ", "Another", bus=bus)

    @pytest.mark.parametrize("sku,name", [("", "Tee"), ("TS-9", "  "), (None, "Tee")])
    async def test_required_fields(self, access, bus, sku, name):
        with pytest.raises(InvalidInputError):
            await catalog.create_product(access, sku, name, bus=bus)

    async def test_listed_by_name(self, access, bus):
        await catalog.create_product(access, "B1", "zip hoodie", bus=bus)
        await catalog.create_product(access, "A1", "Cap", bus=bus)

        assert [p["name"] for p in await catalog.list_products(access)] == ["Cap", "zip hoodie"]

    async def test_publishes_products_changed(self, access, bus):
        seen = []
        bus.subscribe(PRODUCTS_CHANGED, lambda topic, payload: seen.append(payload))

        row = await catalog.create_product(access, "X1", "Thing", bus=bus)

        assert seen == [{"product_id": row["id"]}]


class TestColors:
    async def test_new_line_is_empty(self, line, product):
        assert line["product_id"] == product["id"]
        assert line["color"] == "Black"
        assert line["quantity"] == 0

    async def test_unknown_product(self, access, bus):
        with pytest.raises(ProductNotFoundError):
            await catalog.add_color(access, uuid4(), "Red", bus=bus)

    async def test_duplicate_color_for_product(self, access, bus, product, line):
        with pytest.raises(DuplicateError):
            await catalog.add_color(access, product["id"], "  black", bus=bus)

    async def test_same_color_on_other_product(self, access, bus, line):
        cap = await catalog.create_product(access, "CP-1", "Cap", bus=bus)
        other = await catalog.add_color(access, cap["id"], "Black", bus=bus)
        assert other["id"] != line["id"]

    async def test_list_lines_joins_product(self, access, bus, product, line):
        white = await catalog.add_color(access, product["id"], "White", bus=bus)

        rows = await catalog.list_lines(access)

        assert [r["id"] for r in rows] == [white["id"], line["id"]]
        assert rows[0]["sku"] == "TS-001"
        assert rows[0]["product_name"] == "Basic T-Shirt"

    async def test_publishes_inventory_changed(self, access, bus, product):
        seen = []
        bus.subscribe(INVENTORY_CHANGED, lambda topic, payload: seen.append(payload))

        row = await catalog.add_color(access, product["id"], "Navy", bus=bus)

        assert seen == [{"inventory_id": row["id"]}]
