from app import db
from app.data.core.record_base import RecordBase
from app.utils.timestamps import utcnow


class WebhookConfig(RecordBase):
    """Named webhook subscription: target URL plus the event kinds it receives"""
    __tablename__ = 'webhook_configs'

    DEFAULT_MAX_RETRIES = 3

    name = db.Column(db.String(120), nullable=False)
    url = db.Column(db.String(500), nullable=False, default='')
    events = db.Column(db.JSON, nullable=False, default=list)
    enabled = db.Column(db.Boolean, nullable=False, default=True)
    headers = db.Column(db.JSON, nullable=True)
    max_retries = db.Column(db.Integer, nullable=False, default=DEFAULT_MAX_RETRIES)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def subscribes_to(self, event_kind):
        return bool(self.enabled) and event_kind in (self.events or [])

    def __repr__(self):
        return f'<WebhookConfig {self.name} -> {self.url}>'
