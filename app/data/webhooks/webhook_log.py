from app import db
from app.buisness.core.data_insertion_mixin import DataInsertionMixin
from app.utils.timestamps import utcnow


class WebhookLog(db.Model, DataInsertionMixin):
    """
    One delivery attempt. Append-only; `seq` records insertion order and
    drives eviction once the log store reaches its cap.
    """
    __tablename__ = 'webhook_logs'
    __hidden_fields__ = ('seq',)

    seq = db.Column(db.Integer, primary_key=True, autoincrement=True)
    id = db.Column(db.String(36), unique=True, nullable=False)
    webhook_id = db.Column(db.String(36), nullable=True, index=True)
    webhook_url = db.Column(db.String(500), nullable=False, default='')
    event = db.Column(db.String(40), nullable=True)
    payload = db.Column(db.JSON, nullable=False)
    success = db.Column(db.Boolean, nullable=False, default=False)
    status_code = db.Column(db.Integer, nullable=True)
    message = db.Column(db.Text, nullable=False)
    timestamp = db.Column(db.DateTime, default=utcnow, nullable=False)
    retry_count = db.Column(db.Integer, nullable=False, default=0)
    retry_of = db.Column(db.String(36), nullable=True)

    def __repr__(self):
        outcome = 'ok' if self.success else 'failed'
        return f'<WebhookLog {self.id} {outcome} attempt={self.retry_count}>'
