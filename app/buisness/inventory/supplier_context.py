"""
Supplier Context
CRUD and free-text search over suppliers.
"""

from typing import Any, Dict, List, Optional

from app.buisness.core.data_insertion_mixin import to_snake
from app.buisness.errors import NotFoundError, ValidationError
from app.data.core.record_base import new_id
from app.data.inventory.supplier import Supplier
from app.logger import get_logger
from app.utils.timestamps import utcnow

logger = get_logger("purchasing.buisness.inventory.suppliers")


class SupplierContext:

    EDITABLE_FIELDS = ('name', 'cnpj', 'email', 'phone', 'address')

    def __init__(self, repo, notifier=None):
        self.repo = repo
        self.notifier = notifier

    def list_suppliers(self) -> List[Supplier]:
        return self.repo.list()

    def get_supplier(self, supplier_id) -> Optional[Supplier]:
        return self.repo.get(supplier_id)

    def add_supplier(self, data: Dict[str, Any]) -> Supplier:
        values = self._clean(data)
        if not values.get('name'):
            raise ValidationError('name', "name is required")

        supplier = Supplier(id=new_id(), created_at=utcnow(), **values)
        self.repo.add(supplier)
        logger.info(f"Supplier added: {supplier.name} ({supplier.id})")
        self._notify('Fornecedor adicionado com sucesso')
        return supplier

    def update_supplier(self, supplier_id, data: Dict[str, Any]) -> Supplier:
        supplier = self.repo.get(supplier_id)
        if supplier is None:
            raise NotFoundError("Fornecedor não encontrado")

        values = self._clean(data)
        if 'name' in values and not values['name']:
            raise ValidationError('name', "name is required")
        for key, value in values.items():
            setattr(supplier, key, value)
        self.repo.save(supplier)
        logger.info(f"Supplier updated: {supplier.name} ({supplier.id})")
        self._notify('Fornecedor atualizado com sucesso')
        return supplier

    def delete_supplier(self, supplier_id) -> None:
        """Deleting an unknown id is a no-op"""
        if self.repo.delete(supplier_id):
            logger.info(f"Supplier removed: {supplier_id}")
        self._notify('Fornecedor removido com sucesso')

    def filter_suppliers(self, query: Optional[str] = None) -> List[Supplier]:
        """Case-insensitive match on name and email, substring match on cnpj"""
        suppliers = self.repo.list()
        if not query or not query.strip():
            return suppliers

        needle = query.strip().lower()
        return [
            supplier for supplier in suppliers
            if needle in (supplier.name or '').lower()
            or needle in (supplier.cnpj or '')
            or needle in (supplier.email or '').lower()
        ]

    def _clean(self, data) -> Dict[str, Any]:
        values = {}
        for key, value in (data or {}).items():
            key = to_snake(key)
            if key in self.EDITABLE_FIELDS:
                values[key] = value.strip() if isinstance(value, str) else value
        return values

    def _notify(self, message):
        if self.notifier is not None:
            self.notifier.success(message)
