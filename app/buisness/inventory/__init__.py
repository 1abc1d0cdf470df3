"""
Inventory business layer: product catalog, stock movements and suppliers.
"""

from app.buisness.inventory.product_context import ProductContext
from app.buisness.inventory.supplier_context import SupplierContext

__all__ = [
    'ProductContext',
    'SupplierContext',
]
