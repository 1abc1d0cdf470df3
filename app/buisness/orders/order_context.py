"""
Order Context
Owns order records and every rule about who may change them.

Handles:
- Order creation with field validation
- Updates gated by ownership, role and current status
- Status changes (unrestricted between the three statuses)
- Deletion policy
- Webhook events for each successful mutation
"""

from typing import Any, Dict, List, Optional

from app.buisness.core.data_insertion_mixin import to_camel, to_snake
from app.buisness.errors import AuthenticationError, ForbiddenError, NotFoundError, ValidationError
from app.buisness.orders.status import OrderStatus
from app.buisness.webhooks.events import (
    PEDIDO_CANCELADO,
    PEDIDO_CRIADO,
    STATUS_ATUALIZADO,
    order_cancelled_payload,
    order_created_payload,
    status_updated_payload,
)
from app.buisness.webhooks.config_store import is_http_url
from app.data.core.record_base import new_id
from app.data.orders.order import Order
from app.logger import get_logger
from app.utils.timestamps import utcnow

logger = get_logger("purchasing.buisness.orders")


class OrderContext:
    """
    Business operations over orders.

    Args:
        repo: OrdersRepo
        events: object exposing publish(event_kind, payload), normally the
            WebhookDeliveryEngine (optional)
        notifier: Notifier receiving success messages (optional)
    """

    EDITABLE_FIELDS = ('name', 'quantity', 'reason', 'department', 'status', 'item_link')
    IMMUTABLE_FIELDS = ('id', 'created_by', 'created_by_name', 'created_at', 'updated_at')
    REQUIRED_FIELDS = ('name', 'quantity', 'reason', 'department')
    TEXT_FIELDS = ('name', 'reason', 'department')

    def __init__(self, repo, events=None, notifier=None):
        self.repo = repo
        self.events = events
        self.notifier = notifier

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_order_by_id(self, order_id) -> Optional[Order]:
        return self.repo.get(order_id)

    def filter_by_status(self, status: Optional[str] = None) -> List[Order]:
        """All orders, or only those with the given status"""
        if not status:
            return self.repo.list()
        return self.repo.list_by_status(status)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_order(self, data: Dict[str, Any], acting_user) -> Order:
        """
        Create a pending order authored by acting_user.

        Raises:
            AuthenticationError: no acting user
            ValidationError: missing or invalid field
        """
        self._require_user(acting_user)
        values = self._normalize(data)

        for field in self.REQUIRED_FIELDS:
            if field not in values:
                raise ValidationError(field, f"{field} is required")
        cleaned = self._clean_fields({
            key: value for key, value in values.items()
            if key in self.EDITABLE_FIELDS and key != 'status'
        })

        now = utcnow()
        order = Order(
            id=new_id(),
            name=cleaned['name'],
            quantity=cleaned['quantity'],
            reason=cleaned['reason'],
            department=cleaned['department'],
            item_link=cleaned.get('item_link'),
            status=OrderStatus.INITIAL,
            created_at=now,
            updated_at=now,
            created_by=acting_user.id,
            created_by_name=acting_user.name,
        )
        payload = order_created_payload(order)
        self.repo.add(order)
        logger.info(f"Order created: {order.id} by {acting_user.id}")

        self._publish(PEDIDO_CRIADO, payload)
        self._notify('Pedido criado com sucesso')
        return order

    def update_order(self, order_id, updates: Dict[str, Any], acting_user) -> Order:
        """
        Apply a partial update.

        Checks run in this order: order exists, acting user is the author or
        an admin, a non-admin only changes `status` on a non-pending order,
        no immutable or unknown field is changed, the new values are valid.

        Raises:
            NotFoundError, ForbiddenError, ValidationError, AuthenticationError
        """
        self._require_user(acting_user)
        order = self._get_or_raise(order_id)
        self._authorize(order, acting_user, 'edit')

        values = self._normalize(updates)
        changed = self._changed_fields(order, values)

        if not acting_user.is_admin and order.status != OrderStatus.PENDENTE:
            if any(key != 'status' for key in changed):
                raise ForbiddenError("can only edit pending orders")

        for key in changed:
            if key in self.IMMUTABLE_FIELDS:
                raise ValidationError(key, f"{key} cannot be changed")
            if key not in self.EDITABLE_FIELDS:
                raise ValidationError(key, f"Unknown order field: {key}")

        cleaned = self._clean_fields({key: values[key] for key in changed})
        previous_status = order.status
        if 'status' in cleaned:
            OrderStatus.validate_transition(previous_status, cleaned['status'])

        for key, value in cleaned.items():
            setattr(order, key, value)
        order.updated_at = utcnow()

        status_changed = 'status' in cleaned and cleaned['status'] != previous_status
        payload = status_updated_payload(order, previous_status, acting_user.name) if status_changed else None
        self.repo.save(order)
        logger.info(f"Order updated: {order_id} fields={sorted(cleaned)} by {acting_user.id}")

        if payload is not None:
            self._publish(STATUS_ATUALIZADO, payload)
        self._notify('Pedido atualizado com sucesso')
        return order

    def update_order_status(self, order_id, status: str, acting_user) -> Order:
        return self.update_order(order_id, {'status': status}, acting_user)

    def delete_order(self, order_id, acting_user, reason: Optional[str] = None) -> None:
        """
        Remove an order. Non-admins may only delete their own pending orders.

        Raises:
            NotFoundError, ForbiddenError, AuthenticationError
        """
        self._require_user(acting_user)
        order = self._get_or_raise(order_id)
        self._authorize(order, acting_user, 'delete')

        if not acting_user.is_admin and order.status != OrderStatus.PENDENTE:
            raise ForbiddenError("Can only delete orders with pending status")

        payload = order_cancelled_payload(order, acting_user.name, reason)
        self.repo.delete(order_id)
        logger.info(f"Order deleted: {order_id} by {acting_user.id}")

        self._publish(PEDIDO_CANCELADO, payload)
        self._notify('Pedido excluído com sucesso')

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_user(acting_user):
        if acting_user is None:
            raise AuthenticationError("User not authenticated")

    def _get_or_raise(self, order_id) -> Order:
        order = self.repo.get(order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    @staticmethod
    def _authorize(order, acting_user, action):
        if order.created_by != acting_user.id and not acting_user.is_admin:
            raise ForbiddenError(f"Not authorized to {action} this order")

    @staticmethod
    def _normalize(data) -> Dict[str, Any]:
        if data is None:
            return {}
        return {to_snake(key): value for key, value in data.items()}

    def _changed_fields(self, order, values) -> List[str]:
        """
        Keys whose submitted value differs from the stored one. Editable
        values are compared after cleaning, so '2' equals 2 and an empty
        link equals no link; values that fail cleaning count as changed.
        """
        public = order.to_dict()
        changed = []
        for key, value in values.items():
            if key in self.EDITABLE_FIELDS:
                try:
                    value = self._clean_fields({key: value})[key]
                except ValidationError:
                    changed.append(key)
                    continue
            if key in self.EDITABLE_FIELDS or key in self.IMMUTABLE_FIELDS:
                if value == getattr(order, key) or value == public.get(to_camel(key)):
                    continue
            changed.append(key)
        return changed

    def _clean_fields(self, values) -> Dict[str, Any]:
        cleaned = {}
        for key, value in values.items():
            if key in self.TEXT_FIELDS:
                text = value.strip() if isinstance(value, str) else ''
                if not text:
                    raise ValidationError(key, f"{key} is required")
                cleaned[key] = text
            elif key == 'quantity':
                cleaned[key] = self._clean_quantity(value)
            elif key == 'item_link':
                cleaned[key] = self._clean_link(value)
            elif key == 'status':
                cleaned[key] = value
        return cleaned

    @staticmethod
    def _clean_quantity(value) -> int:
        if isinstance(value, bool):
            raise ValidationError('quantity', "quantity must be a positive integer")
        if isinstance(value, float) and not value.is_integer():
            raise ValidationError('quantity', "quantity must be a positive integer")
        try:
            quantity = int(value)
        except (TypeError, ValueError):
            raise ValidationError('quantity', "quantity must be a positive integer")
        if quantity <= 0:
            raise ValidationError('quantity', "quantity must be greater than zero")
        return quantity

    @staticmethod
    def _clean_link(value) -> Optional[str]:
        link = (value or '').strip() if isinstance(value, str) or value is None else None
        if link is None:
            raise ValidationError('item_link', "item link must be a URL")
        if not link:
            return None
        if not is_http_url(link):
            raise ValidationError('item_link', "item link must be an http(s) URL")
        return link

    def _publish(self, event_kind, payload):
        if self.events is None:
            return
        try:
            self.events.publish(event_kind, payload)
        except Exception as e:
            logger.error(f"Webhook publish failed for {event_kind}: {e}")

    def _notify(self, message):
        if self.notifier is not None:
            self.notifier.success(message)
