"""
Application state

Explicit owner of the repositories, the webhook engine, the business
contexts and the current user of a library session. Nothing in the core
reads module-level globals; callers build one of these and pass it around
(the Flask factory stores its instance in app.extensions['purchasing']).
"""

from app.buisness.core.user_context import UserDirectory
from app.buisness.errors import AuthenticationError
from app.buisness.inventory.product_context import ProductContext
from app.buisness.inventory.supplier_context import SupplierContext
from app.buisness.orders.order_context import OrderContext
from app.buisness.webhooks.config_store import WebhookConfigStore
from app.buisness.webhooks.delivery import DEFAULT_TIMEOUT_SECONDS, WebhookDeliveryEngine
from app.logger import get_logger
from app.services.notifier import Notifier

logger = get_logger("purchasing.buisness.core.application_state")


class ApplicationState:
    """
    Wires repositories into contexts.

    Args:
        orders_repo, users_repo, webhook_config_repo, webhook_log_repo,
        products_repo, suppliers_repo: repository port implementations
        notifier: Notifier shared by every context
        engine_options: forwarded to WebhookDeliveryEngine (http, scheduler,
            executor, app, timeout, max_workers)
        reset_ttl_minutes: password reset token lifetime
    """

    def __init__(self, orders_repo, users_repo, webhook_config_repo, webhook_log_repo,
                 products_repo, suppliers_repo, notifier=None, reset_ttl_minutes=60,
                 **engine_options):
        self.notifier = notifier or Notifier()

        self.engine = WebhookDeliveryEngine(
            webhook_log_repo, config_repo=webhook_config_repo, **engine_options
        )
        self.webhooks = WebhookConfigStore(webhook_config_repo, engine=self.engine)
        self.orders = OrderContext(orders_repo, events=self.engine, notifier=self.notifier)
        self.users = UserDirectory(
            users_repo, events=self.engine, notifier=self.notifier,
            reset_ttl_minutes=reset_ttl_minutes,
        )
        self.products = ProductContext(products_repo, notifier=self.notifier)
        self.suppliers = SupplierContext(suppliers_repo, notifier=self.notifier)

        self._current_user = None

    @classmethod
    def in_memory(cls, log_limit=None, **options) -> 'ApplicationState':
        """State backed by dictionaries; nothing is persisted"""
        from app.data.repositories.memory import (
            MemoryOrdersRepo,
            MemoryProductsRepo,
            MemorySuppliersRepo,
            MemoryUsersRepo,
            MemoryWebhookConfigRepo,
            MemoryWebhookLogRepo,
        )
        return cls(
            MemoryOrdersRepo(),
            MemoryUsersRepo(),
            MemoryWebhookConfigRepo(),
            MemoryWebhookLogRepo(log_limit),
            MemoryProductsRepo(),
            MemorySuppliersRepo(),
            **options
        )

    @classmethod
    def from_sqlalchemy(cls, flask_app, log_limit=None, timeout=DEFAULT_TIMEOUT_SECONDS,
                        **options) -> 'ApplicationState':
        """State backed by the Flask-SQLAlchemy session of flask_app"""
        from app.data.repositories.sql import (
            SqlOrdersRepo,
            SqlProductsRepo,
            SqlSuppliersRepo,
            SqlUsersRepo,
            SqlWebhookConfigRepo,
            SqlWebhookLogRepo,
        )
        return cls(
            SqlOrdersRepo(),
            SqlUsersRepo(),
            SqlWebhookConfigRepo(),
            SqlWebhookLogRepo(log_limit),
            SqlProductsRepo(),
            SqlSuppliersRepo(),
            app=flask_app,
            timeout=timeout,
            **options
        )

    # ------------------------------------------------------------------
    # Session user
    # ------------------------------------------------------------------

    @property
    def current_user(self):
        return self._current_user

    def login(self, email, password):
        """Authenticate and remember the user for this session"""
        self._current_user = self.users.authenticate(email, password)
        return self._current_user

    def logout(self):
        self._current_user = None

    def require_user(self):
        if self._current_user is None:
            raise AuthenticationError("User not authenticated")
        return self._current_user

    def shutdown(self):
        self.engine.shutdown()
