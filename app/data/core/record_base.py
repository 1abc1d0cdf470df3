from uuid import uuid4
from app import db
from app.buisness.core.data_insertion_mixin import DataInsertionMixin
from app.utils.timestamps import utcnow


def new_id():
    return str(uuid4())


class RecordBase(db.Model, DataInsertionMixin):
    """Abstract base for records identified by an opaque string id"""

    __abstract__ = True

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
