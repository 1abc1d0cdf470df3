"""
Repository ports

The business contexts only talk to these interfaces. `sql.py` implements
them on Flask-SQLAlchemy, `memory.py` on plain dictionaries.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class Repository(ABC):
    """Keyed collection of records"""

    @abstractmethod
    def get(self, record_id):
        """Return the record with this id, or None"""
        pass

    @abstractmethod
    def list(self) -> List:
        """Return every record in insertion order"""
        pass

    @abstractmethod
    def add(self, record):
        """Persist a new record and return it"""
        pass

    @abstractmethod
    def save(self, record):
        """Persist changes made to a record already in the collection"""
        pass

    @abstractmethod
    def delete(self, record_id) -> bool:
        """Remove a record; returns False when nothing was removed"""
        pass


class OrdersRepo(Repository):

    @abstractmethod
    def list_by_status(self, status: str) -> List:
        pass


class UsersRepo(Repository):

    @abstractmethod
    def get_by_email(self, email: str):
        """Exact match; callers pass the canonical (lower-cased) email"""
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def count_admins(self) -> int:
        pass


class WebhookConfigRepo(Repository):

    @abstractmethod
    def list_subscribed(self, event_kind: str) -> List:
        """Enabled configs whose events include event_kind"""
        pass


class ProductsRepo(Repository):

    @abstractmethod
    def get_by_sku(self, sku: str):
        pass


class SuppliersRepo(Repository):
    pass


class WebhookLogRepo(ABC):
    """
    Append-only log of delivery attempts, capped at `limit` entries.
    append() must be atomic with respect to concurrent appends: the new entry
    and the eviction of the oldest ones happen as one step.
    """

    DEFAULT_LIMIT = 100

    def __init__(self, limit: Optional[int] = None):
        self.limit = limit or self.DEFAULT_LIMIT

    @abstractmethod
    def append(self, log) -> None:
        pass

    @abstractmethod
    def list(self, limit: Optional[int] = None) -> List:
        """Most recent first"""
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass
