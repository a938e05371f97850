"""Pure aggregations over already-fetched movement and inventory rows."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

LOW_STOCK_THRESHOLD = 5

OUT_OF_STOCK = "Out of Stock"
LOW_STOCK = "Low Stock"
IN_STOCK = "In Stock"

UNKNOWN_SKU = "Unknown"


@dataclass
class MovementStats:
    total_in: int = 0
    total_out: int = 0
    net_change: int = 0
    total_transactions: int = 0
    top_product: Optional[str] = None
    avg_transaction_size: float = 0.0


def stock_status(quantity: int) -> str:
    if quantity <= 0:
        return OUT_OF_STOCK
    if quantity <= LOW_STOCK_THRESHOLD:
        return LOW_STOCK
    return IN_STOCK


def movement_stats(rows: Sequence[Dict[str, Any]]) -> MovementStats:
    if not rows:
        return MovementStats()

    total_in = sum(r["quantity"] for r in rows if r["movement_type"] == "IN")
    total_out = sum(r["quantity"] for r in rows if r["movement_type"] == "OUT")

    # insertion-ordered; max() keeps the first SKU seen on ties
    counts: Dict[str, int] = {}
    for r in rows:
        sku = r.get("sku") or UNKNOWN_SKU
        counts[sku] = counts.get(sku, 0) + 1
    top_product = max(counts, key=counts.__getitem__)

    return MovementStats(
        total_in=total_in,
        total_out=total_out,
        net_change=total_in - total_out,
        total_transactions=len(rows),
        top_product=top_product,
        avg_transaction_size=(total_in + total_out) / len(rows),
    )


def inventory_summary(products: Sequence[Any], lines: Sequence[Dict[str, Any]]) -> Dict[str, int]:
    return {
        "total_products": len(products),
        "total_variants": len(lines),
        "total_stock": sum(int(line["quantity"]) for line in lines),
        "low_stock_items": sum(1 for line in lines if stock_status(int(line["quantity"])) == LOW_STOCK),
    }


def search_lines(lines: Iterable[Dict[str, Any]], term: Optional[str]) -> List[Dict[str, Any]]:
    """Match SKU, product name or colour, case-insensitively. Blank term matches all."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(lines)
    return [
        line for line in lines
        if needle in (line.get("sku") or "").lower()
        or needle in (line.get("product_name") or "").lower()
        or needle in (line.get("color") or "").lower()
    ]


def stock_report(
    lines: Iterable[Dict[str, Any]],
    product_id=None,
    min_quantity: Optional[int] = None,
    max_quantity: Optional[int] = None,
    sort_by: str = "quantity",
) -> Dict[str, Any]:
    """
    Reports panel: filter inventory lines, then derive the chart series.

    - sort_by "quantity": highest stock first; "name": product name A-Z.
    - by_product totals keep the order products are first met after sorting.
    """
    selected = list(lines)
    if product_id is not None:
        selected = [line for line in selected if line["product_id"] == product_id]
    if min_quantity is not None:
        selected = [line for line in selected if line["quantity"] >= min_quantity]
    if max_quantity is not None:
        selected = [line for line in selected if line["quantity"] <= max_quantity]

    if sort_by == "name":
        selected.sort(key=lambda line: (line.get("product_name") or "").lower())
    else:
        selected.sort(key=lambda line: line["quantity"], reverse=True)

    chart = [
        {"name": f"{line.get('product_name')} ({line.get('color')})", "quantity": line["quantity"], "sku": line.get("sku")}
        for line in selected
    ]

    by_product: Dict[str, int] = {}
    for line in selected:
        name = line.get("product_name") or UNKNOWN_SKU
        by_product[name] = by_product.get(name, 0) + line["quantity"]

    return {
        "lines": selected,
        "chart": chart,
        "by_product": [{"name": k, "quantity": v} for k, v in by_product.items()],
        "stats": {
            "total_items": len(selected),
            "total_quantity": sum(line["quantity"] for line in selected),
            "low_stock_items": sum(1 for line in selected if stock_status(line["quantity"]) == LOW_STOCK),
            "out_of_stock_items": sum(1 for line in selected if line["quantity"] == 0),
        },
    }
