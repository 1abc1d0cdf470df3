"""
Flask-SQLAlchemy implementations of the repository ports.

Every mutation commits immediately; on failure the session is rolled back
and the exception re-raised to the calling context.
"""

import threading
from typing import List, Optional

from app import db
from app.data.core.user_info.user import User
from app.data.inventory.product import Product
from app.data.inventory.supplier import Supplier
from app.data.orders.order import Order
from app.data.repositories.base import (
    OrdersRepo,
    ProductsRepo,
    Repository,
    SuppliersRepo,
    UsersRepo,
    WebhookConfigRepo,
    WebhookLogRepo,
)
from app.data.webhooks.webhook_config import WebhookConfig
from app.data.webhooks.webhook_log import WebhookLog
from app.logger import get_logger
from app.utils.logging_sanitizer import sanitize_exception_message

logger = get_logger("purchasing.data.repositories")


def _commit(action):
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error during {action}: {sanitize_exception_message(e)}")
        raise


class SqlAlchemyRepository(Repository):
    model = None

    def get(self, record_id):
        if not record_id:
            return None
        return db.session.get(self.model, record_id)

    def list(self) -> List:
        return self.model.query.order_by(self.model.created_at).all()

    def add(self, record):
        db.session.add(record)
        _commit(f"create {self.model.__name__}")
        return record

    def save(self, record):
        db.session.add(record)
        _commit(f"update {self.model.__name__}")
        return record

    def delete(self, record_id) -> bool:
        record = self.get(record_id)
        if record is None:
            return False
        db.session.delete(record)
        _commit(f"delete {self.model.__name__}")
        return True


class SqlOrdersRepo(SqlAlchemyRepository, OrdersRepo):
    model = Order

    def list_by_status(self, status: str) -> List:
        return Order.query.filter_by(status=status).order_by(Order.created_at).all()


class SqlUsersRepo(SqlAlchemyRepository, UsersRepo):
    model = User

    def get_by_email(self, email: str):
        return User.query.filter_by(email=email).first()

    def count(self) -> int:
        return User.query.count()

    def count_admins(self) -> int:
        return User.query.filter_by(role=User.ROLE_ADMIN).count()


class SqlWebhookConfigRepo(SqlAlchemyRepository, WebhookConfigRepo):
    model = WebhookConfig

    def list_subscribed(self, event_kind: str) -> List:
        # events is a JSON column; membership is checked in Python to stay backend-neutral
        return [config for config in self.list() if config.subscribes_to(event_kind)]


class SqlProductsRepo(SqlAlchemyRepository, ProductsRepo):
    model = Product

    def get_by_sku(self, sku: str):
        return Product.query.filter_by(sku=sku).first()


class SqlSuppliersRepo(SqlAlchemyRepository, SuppliersRepo):
    model = Supplier


class SqlWebhookLogRepo(WebhookLogRepo):
    """
    Capped delivery log. The class-level lock serializes append + trim for
    every thread of this process.
    """

    _lock = threading.Lock()

    def append(self, log) -> None:
        with self._lock:
            try:
                db.session.add(log)
                db.session.flush()
                if WebhookLog.query.count() > self.limit:
                    # seq of the oldest entry that survives
                    threshold = (
                        db.session.query(WebhookLog.seq)
                        .order_by(WebhookLog.seq.desc())
                        .offset(self.limit - 1)
                        .limit(1)
                        .scalar()
                    )
                    WebhookLog.query.filter(WebhookLog.seq < threshold).delete(synchronize_session=False)
                db.session.commit()
            except Exception as e:
                db.session.rollback()
                logger.error(f"Error appending webhook log: {sanitize_exception_message(e)}")
                raise

    def list(self, limit: Optional[int] = None) -> List:
        return WebhookLog.query.order_by(WebhookLog.seq.desc()).limit(limit or self.limit).all()

    def count(self) -> int:
        return WebhookLog.query.count()

    def clear(self) -> None:
        with self._lock:
            WebhookLog.query.delete()
            _commit("clear webhook logs")
