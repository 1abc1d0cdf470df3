"""
Inventory models: stocked products and their suppliers.
"""

from app.data.inventory.product import Product
from app.data.inventory.supplier import Supplier

__all__ = [
    'Product',
    'Supplier',
]
