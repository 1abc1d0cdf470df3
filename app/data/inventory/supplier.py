from app import db
from app.data.core.record_base import RecordBase


class Supplier(RecordBase):
    __tablename__ = 'suppliers'

    name = db.Column(db.String(200), nullable=False)
    cnpj = db.Column(db.String(20), nullable=True)
    email = db.Column(db.String(120), nullable=True)
    phone = db.Column(db.String(40), nullable=True)
    address = db.Column(db.String(300), nullable=True)

    def __repr__(self):
        return f'<Supplier {self.name}>'
