"""
Bar stock models.

Models:
- LiquorItem (bottles + leftover ml, with a total in ml)
- OtherStockItem (single quantity in a free-form unit)
- DailyStock (one snapshot per item per calendar day)
- StockMovement (day-over-day difference derived from two snapshots)
"""

ITEM_TYPE_LIQUOR = "liquor"
ITEM_TYPE_OTHER = "other"
ITEM_TYPES = (ITEM_TYPE_LIQUOR, ITEM_TYPE_OTHER)
