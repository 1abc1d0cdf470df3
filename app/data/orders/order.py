from app import db
from app.data.core.record_base import RecordBase
from app.utils.timestamps import utcnow


class Order(RecordBase):
    """
    Purchase request submitted by a user.

    Data model only: authorization and status rules live in
    `app/buisness/orders/order_context.py`.
    """
    __tablename__ = 'orders'

    name = db.Column(db.String(200), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    reason = db.Column(db.Text, nullable=False)
    department = db.Column(db.String(100), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='pendente')  # pendente/aguardando/resolvido
    item_link = db.Column(db.String(500), nullable=True)
    updated_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    # Denormalized author; users may be removed while their orders remain
    created_by = db.Column(db.String(36), nullable=False, index=True)
    created_by_name = db.Column(db.String(120), nullable=False)

    def __repr__(self):
        return f'<Order {self.id}: {self.name} x{self.quantity} [{self.status}]>'
