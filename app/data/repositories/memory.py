"""
In-memory implementations of the repository ports.

Used by unit tests and by library callers that run without a database.
Records are the regular model instances, kept transient (never attached to
a SQLAlchemy session).
"""

import threading
from collections import deque
from typing import List, Optional

from app.data.repositories.base import (
    OrdersRepo,
    ProductsRepo,
    Repository,
    SuppliersRepo,
    UsersRepo,
    WebhookConfigRepo,
    WebhookLogRepo,
)


class MemoryRepository(Repository):

    def __init__(self):
        self._records = {}
        self._lock = threading.RLock()

    def get(self, record_id):
        return self._records.get(record_id)

    def list(self) -> List:
        with self._lock:
            return [record for record in self._records.values()]

    def add(self, record):
        with self._lock:
            self._records[record.id] = record
        return record

    def save(self, record):
        with self._lock:
            self._records[record.id] = record
        return record

    def delete(self, record_id) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None


class MemoryOrdersRepo(MemoryRepository, OrdersRepo):

    def list_by_status(self, status: str) -> List:
        return [order for order in self.list() if order.status == status]


class MemoryUsersRepo(MemoryRepository, UsersRepo):

    def get_by_email(self, email: str):
        for user in self.list():
            if user.email == email:
                return user
        return None

    def count(self) -> int:
        return len(self._records)

    def count_admins(self) -> int:
        return sum(1 for user in self.list() if user.is_admin)


class MemoryWebhookConfigRepo(MemoryRepository, WebhookConfigRepo):

    def list_subscribed(self, event_kind: str) -> List:
        return [config for config in self.list() if config.subscribes_to(event_kind)]


class MemoryProductsRepo(MemoryRepository, ProductsRepo):

    def get_by_sku(self, sku: str):
        for product in self.list():
            if product.sku == sku:
                return product
        return None


class MemorySuppliersRepo(MemoryRepository, SuppliersRepo):
    pass


class MemoryWebhookLogRepo(WebhookLogRepo):

    def __init__(self, limit: Optional[int] = None):
        super().__init__(limit)
        self._entries = deque()
        self._lock = threading.Lock()

    def append(self, log) -> None:
        with self._lock:
            self._entries.append(log)
            while len(self._entries) > self.limit:
                self._entries.popleft()

    def list(self, limit: Optional[int] = None) -> List:
        with self._lock:
            newest_first = [entry for entry in reversed(self._entries)]
        return newest_first[:limit or self.limit]

    def count(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
