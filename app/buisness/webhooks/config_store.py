"""
Webhook Configuration Store

CRUD over WebhookConfig records keyed by id. Names need not be unique.
"""

from typing import List, Optional
from urllib.parse import urlparse

from app.buisness.errors import ValidationError
from app.buisness.webhooks.events import EVENT_KINDS
from app.data.core.record_base import new_id
from app.data.webhooks.webhook_config import WebhookConfig
from app.logger import get_logger
from app.utils.logging_sanitizer import sanitize_headers
from app.utils.timestamps import utcnow

logger = get_logger("purchasing.buisness.webhooks.config_store")


def is_http_url(value) -> bool:
    parsed = urlparse(value or '')
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


class WebhookConfigStore:
    """
    Args:
        repo: WebhookConfigRepo
        engine: WebhookDeliveryEngine whose pending retries are cancelled when
            a config is deleted or disabled (optional)
    """

    EDITABLE_FIELDS = ('id', 'name', 'url', 'events', 'enabled', 'headers', 'max_retries')

    def __init__(self, repo, engine=None):
        self.repo = repo
        self.engine = engine

    def list(self) -> List[WebhookConfig]:
        return self.repo.list()

    def get(self, config_id) -> Optional[WebhookConfig]:
        return self.repo.get(config_id)

    def save(self, data) -> WebhookConfig:
        """
        Insert or update a configuration.

        Args:
            data: dict (camelCase or snake_case keys) or WebhookConfig. A
                missing id creates a new record with a generated id.

        Raises:
            ValidationError: name/url missing, url not http(s), no events,
                unknown event kind, negative max_retries
        """
        if isinstance(data, WebhookConfig):
            data = {column: getattr(data, column) for column in self.EDITABLE_FIELDS}
        values = WebhookConfig.normalize_keys(data)
        self._validate(values)

        config_id = values.pop('id', None)
        values.pop('created_at', None)
        values.pop('updated_at', None)
        now = utcnow()

        existing = self.repo.get(config_id) if config_id else None
        if existing is None:
            config = WebhookConfig(
                id=config_id or new_id(),
                enabled=True,
                headers={},
                max_retries=WebhookConfig.DEFAULT_MAX_RETRIES,
                created_at=now,
            )
            for key, value in values.items():
                setattr(config, key, value)
            config.updated_at = now
            self.repo.add(config)
            logger.info(f"Webhook config created: {config.name} ({config.id})")
        else:
            config = existing
            for key, value in values.items():
                setattr(config, key, value)
            config.updated_at = now
            self.repo.save(config)
            logger.info(f"Webhook config updated: {config.name} ({config.id})")

        logger.debug(f"Webhook config {config.id} headers={sanitize_headers(config.headers)}")

        if not config.enabled and self.engine is not None:
            self.engine.cancel_retries(config.id)
        return config

    def delete(self, config_id) -> None:
        """Idempotent; pending retries of the config are dropped"""
        if self.engine is not None:
            self.engine.cancel_retries(config_id)
        if self.repo.delete(config_id):
            logger.info(f"Webhook config deleted: {config_id}")

    @staticmethod
    def _validate(values):
        name = (values.get('name') or '').strip()
        if not name:
            raise ValidationError('name', 'Webhook name is required')
        values['name'] = name

        url = (values.get('url') or '').strip()
        if not url:
            raise ValidationError('url', 'Webhook URL is required')
        if not is_http_url(url):
            raise ValidationError('url', 'Webhook URL must be an http(s) URL')
        values['url'] = url

        events = values.get('events') or []
        if isinstance(events, str):
            events = [events]
        if not events:
            raise ValidationError('events', 'Select at least one event')
        unknown = [event for event in events if event not in EVENT_KINDS]
        if unknown:
            raise ValidationError('events', f"Unknown event kind: {', '.join(map(str, unknown))}")
        # de-duplicate, keep order
        values['events'] = list(dict.fromkeys(events))

        if 'max_retries' in values:
            max_retries = values['max_retries']
            if max_retries is None:
                values['max_retries'] = WebhookConfig.DEFAULT_MAX_RETRIES
            else:
                if isinstance(max_retries, bool):
                    raise ValidationError('max_retries', 'max retries must be a non-negative integer')
                try:
                    max_retries = int(max_retries)
                except (TypeError, ValueError):
                    raise ValidationError('max_retries', 'max retries must be a non-negative integer')
                if max_retries < 0:
                    raise ValidationError('max_retries', 'max retries must be a non-negative integer')
                values['max_retries'] = max_retries

        if 'headers' in values:
            headers = values['headers'] or {}
            if not isinstance(headers, dict):
                raise ValidationError('headers', 'headers must be a key/value mapping')
            values['headers'] = {str(key): str(value) for key, value in headers.items()}

        if 'enabled' in values:
            values['enabled'] = bool(values['enabled'])
