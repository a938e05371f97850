"""
Stock ledger tables.

Models:
- InventoryLine (quantity per product + colour)
- StockMovement (append-only IN/OUT records that drive InventoryLine.quantity)
"""
