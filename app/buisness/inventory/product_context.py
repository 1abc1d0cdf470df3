"""
Product Context
Stock records: product CRUD, stock movements and low-stock detection.
"""

import math
from typing import Any, Dict, List, Optional

from app.buisness.core.data_insertion_mixin import to_snake
from app.buisness.errors import ConflictError, NotFoundError, ValidationError
from app.data.core.record_base import new_id
from app.data.inventory.product import Product
from app.logger import get_logger
from app.utils.timestamps import utcnow

logger = get_logger("purchasing.buisness.inventory.products")


class ProductContext:
    """
    Args:
        repo: ProductsRepo
        notifier: Notifier for success and low-stock messages (optional)
    """

    EDITABLE_FIELDS = (
        'name', 'sku', 'category', 'price', 'cost', 'quantity',
        'supplier', 'minimum_stock', 'description', 'image',
    )
    NUMERIC_FIELDS = {'price': float, 'cost': float, 'quantity': int, 'minimum_stock': int}

    def __init__(self, repo, notifier=None):
        self.repo = repo
        self.notifier = notifier

    def list_products(self) -> List[Product]:
        return self.repo.list()

    def get_product(self, product_id) -> Optional[Product]:
        return self.repo.get(product_id)

    def get_low_stock_products(self) -> List[Product]:
        return [product for product in self.repo.list() if product.is_low_stock]

    def add_product(self, data: Dict[str, Any]) -> Product:
        """
        Raises:
            ValidationError: name or sku missing, bad numeric value
            ConflictError: sku already used
        """
        values = self._clean(data)
        for field in ('name', 'sku'):
            if not values.get(field):
                raise ValidationError(field, f"{field} is required")

        if self.repo.get_by_sku(values['sku']) is not None:
            raise ConflictError("Este código SKU já está em uso")

        now = utcnow()
        product = Product(
            id=new_id(),
            price=0.0,
            cost=0.0,
            quantity=0,
            minimum_stock=0,
            created_at=now,
            updated_at=now,
        )
        for key, value in values.items():
            setattr(product, key, value)
        self.repo.add(product)
        logger.info(f"Product added: {product.sku} ({product.id})")
        self._notify('success', 'Produto adicionado com sucesso')
        return product

    def update_product(self, product_id, data: Dict[str, Any]) -> Product:
        """
        Raises:
            NotFoundError: unknown id
            ConflictError: sku changed to one used by another product
        """
        product = self._get_or_raise(product_id)
        values = self._clean(data)

        for field in ('name', 'sku'):
            if field in values and not values[field]:
                raise ValidationError(field, f"{field} is required")

        new_sku = values.get('sku')
        if new_sku and new_sku != product.sku:
            other = self.repo.get_by_sku(new_sku)
            if other is not None and other.id != product.id:
                raise ConflictError("Este código SKU já está em uso")

        for key, value in values.items():
            setattr(product, key, value)
        product.updated_at = utcnow()
        self.repo.save(product)
        logger.info(f"Product updated: {product.sku} fields={sorted(values)}")
        self._notify('success', 'Produto atualizado com sucesso')
        return product

    def delete_product(self, product_id) -> None:
        product = self._get_or_raise(product_id)
        sku = product.sku
        self.repo.delete(product_id)
        logger.info(f"Product removed: {sku}")
        self._notify('success', 'Produto removido com sucesso')

    def update_stock(self, product_id, quantity: int, is_addition: bool = True) -> Product:
        """
        Add or remove units. Removal never takes the stock below zero.
        A low-stock warning is raised when the result is at or under the minimum.
        """
        product = self._get_or_raise(product_id)
        amount = self._to_number('quantity', quantity, int)
        if amount < 0:
            raise ValidationError('quantity', "quantity must not be negative")

        current = product.quantity or 0
        new_quantity = current + amount if is_addition else max(0, current - amount)
        product.quantity = new_quantity
        product.updated_at = utcnow()
        self.repo.save(product)

        action = 'adicionado' if is_addition else 'removido'
        logger.info(f"Stock {action} for {product.sku}: {current} -> {new_quantity}")
        self._notify('success', f"Estoque {action} com sucesso")

        if new_quantity <= (product.minimum_stock or 0):
            logger.warning(f"Low stock for {product.sku}: {new_quantity} <= {product.minimum_stock}")
            self._notify('warning', f"Alerta: Estoque baixo para {product.name}")
        return product

    # ------------------------------------------------------------------

    def _get_or_raise(self, product_id) -> Product:
        product = self.repo.get(product_id)
        if product is None:
            raise NotFoundError("Produto não encontrado")
        return product

    def _clean(self, data) -> Dict[str, Any]:
        values = {}
        for key, value in (data or {}).items():
            key = to_snake(key)
            if key not in self.EDITABLE_FIELDS:
                continue
            if key in self.NUMERIC_FIELDS:
                value = self._to_number(key, value, self.NUMERIC_FIELDS[key])
                if value < 0:
                    raise ValidationError(key, f"{key} must not be negative")
            elif isinstance(value, str):
                value = value.strip()
            values[key] = value
        return values

    @staticmethod
    def _to_number(field, value, kind):
        if isinstance(value, bool):
            raise ValidationError(field, f"{field} must be a number")
        try:
            number = kind(value)
        except (TypeError, ValueError, OverflowError):
            raise ValidationError(field, f"{field} must be a number")
        if not math.isfinite(number):
            raise ValidationError(field, f"{field} must be a finite number")
        return number

    def _notify(self, level, message):
        if self.notifier is not None:
            getattr(self.notifier, level)(message)
