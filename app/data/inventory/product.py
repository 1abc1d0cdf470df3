from app import db
from app.data.core.record_base import RecordBase
from app.utils.timestamps import utcnow


class Product(RecordBase):
    """Stocked item tracked by the inventory module"""
    __tablename__ = 'products'

    name = db.Column(db.String(200), nullable=False)
    sku = db.Column(db.String(60), unique=True, nullable=False)
    category = db.Column(db.String(100), nullable=True)
    price = db.Column(db.Float, nullable=False, default=0.0)
    cost = db.Column(db.Float, nullable=False, default=0.0)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    supplier = db.Column(db.String(200), nullable=True)
    minimum_stock = db.Column(db.Integer, nullable=False, default=0)
    description = db.Column(db.Text, nullable=True)
    image = db.Column(db.String(500), nullable=True)
    updated_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    @property
    def is_low_stock(self):
        return (self.quantity or 0) <= (self.minimum_stock or 0)

    def __repr__(self):
        return f'<Product {self.sku}: {self.name} qty={self.quantity}>'
