"""
Webhook Delivery Engine

Posts event payloads to subscribed endpoints, records one WebhookLog per
attempt and schedules retries with exponential backoff plus jitter.

Delivery is best-effort: nothing in this module raises to the business
operation that emitted the event. Every failure ends up in the log.
"""

import json
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import requests

from app.buisness.webhooks.events import build_test_payload
from app.buisness.webhooks.retry_scheduler import RetryScheduler
from app.data.core.record_base import new_id
from app.data.webhooks.webhook_config import WebhookConfig
from app.data.webhooks.webhook_log import WebhookLog
from app.logger import get_logger
from app.utils.logging_sanitizer import sanitize_headers
from app.utils.timestamps import utcnow

logger = get_logger("purchasing.buisness.webhooks.delivery")

DEFAULT_TIMEOUT_SECONDS = 10
BASE_DELAY_MS = 1000
MAX_JITTER_MS = 1000
MAX_DELAY_MS = 30000

MESSAGE_DELIVERED = 'delivered successfully'
MESSAGE_NO_URL = 'webhook URL not configured'


def compute_backoff_delay(attempt: int, jitter_ms: Optional[float] = None) -> float:
    """
    Delay in milliseconds before retry number `attempt + 1`.

    2^attempt seconds plus up to one second of jitter, capped at 30 seconds.
    """
    if jitter_ms is None:
        jitter_ms = random.uniform(0, MAX_JITTER_MS)
    return min(2 ** attempt * BASE_DELAY_MS + jitter_ms, MAX_DELAY_MS)


@dataclass(frozen=True)
class DeliveryTarget:
    """
    Detached snapshot of a WebhookConfig.

    Worker threads and retry timers only see this snapshot, never the ORM
    instance bound to the request session.
    """
    config_id: Optional[str]
    url: str
    max_retries: int
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config, max_retries: Optional[int] = None) -> 'DeliveryTarget':
        if max_retries is None:
            max_retries = config.max_retries
        if max_retries is None:
            max_retries = WebhookConfig.DEFAULT_MAX_RETRIES
        return cls(
            config_id=config.id,
            url=(config.url or '').strip(),
            max_retries=max(int(max_retries), 0),
            headers=dict(config.headers or {}),
        )

    def request_headers(self) -> Dict[str, str]:
        # Content-Type always wins over a configured one
        headers = {
            name: value for name, value in self.headers.items()
            if name.lower() != 'content-type'
        }
        headers['Content-Type'] = 'application/json'
        return headers


class WebhookDeliveryEngine:
    """
    Sends payloads and keeps the delivery log.

    Args:
        log_repo: WebhookLogRepo receiving one entry per attempt
        config_repo: WebhookConfigRepo consulted by publish()
        http: requests.Session-like object exposing post()
        scheduler: RetryScheduler (or compatible) for delayed retries
        executor: concurrent.futures executor used by broadcast()
        app: Flask app; when set, background work runs inside its app context
        timeout: per-request timeout in seconds
    """

    def __init__(self, log_repo, config_repo=None, http=None, scheduler=None,
                 executor=None, app=None, timeout=DEFAULT_TIMEOUT_SECONDS, max_workers=4):
        self.log_repo = log_repo
        self.config_repo = config_repo
        self.http = http if http is not None else requests.Session()
        self.scheduler = scheduler if scheduler is not None else RetryScheduler()
        self.executor = executor if executor is not None else ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix='webhook'
        )
        self.app = app
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def deliver(self, config, payload: dict, attempt: int = 0,
                retry_of: Optional[str] = None, max_retries: Optional[int] = None) -> WebhookLog:
        """
        Attempt one delivery and return its log entry.

        On failure a retry with attempt + 1 is scheduled while
        attempt < max_retries; this call does not wait for it.
        """
        target = DeliveryTarget.from_config(config, max_retries)
        return self._attempt(target, payload, attempt, retry_of)

    def broadcast(self, event_kind: str, payload: dict, configs) -> List:
        """
        Deliver to every enabled config subscribed to event_kind, concurrently.

        Returns the submitted futures; callers are not expected to wait on them.
        """
        targets = [
            DeliveryTarget.from_config(config)
            for config in configs
            if config.subscribes_to(event_kind)
        ]
        if not targets:
            logger.debug(f"No webhook subscribed to {event_kind}")
            return []

        logger.info(f"Broadcasting {event_kind} to {len(targets)} webhook(s)")
        return [
            self.executor.submit(self._in_app_context, self._attempt, target, payload, 0, None)
            for target in targets
        ]

    def publish(self, event_kind: str, payload: dict) -> List:
        """Broadcast to the configurations currently stored in config_repo"""
        try:
            configs = self.config_repo.list_subscribed(event_kind)
        except Exception as e:
            logger.error(f"Could not load webhook configurations for {event_kind}: {e}")
            return []
        return self.broadcast(event_kind, payload, configs)

    def test(self, config) -> WebhookLog:
        """Send the synthetic test payload once; test deliveries never retry"""
        return self.deliver(config, build_test_payload(), max_retries=0)

    # ------------------------------------------------------------------
    # Log and lifecycle
    # ------------------------------------------------------------------

    def list_logs(self, limit: Optional[int] = None) -> List[WebhookLog]:
        return self.log_repo.list(limit)

    def clear_logs(self):
        self.log_repo.clear()
        logger.info("Webhook delivery log cleared")

    def cancel_retries(self, config_id) -> int:
        return self.scheduler.cancel(config_id)

    def shutdown(self, wait=False):
        self.scheduler.cancel_all()
        self.executor.shutdown(wait=wait)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _in_app_context(self, func, *args):
        if self.app is None:
            return func(*args)
        with self.app.app_context():
            return func(*args)

    def _attempt(self, target: DeliveryTarget, payload: dict, attempt: int,
                 retry_of: Optional[str]) -> WebhookLog:
        log_id = new_id()
        log = WebhookLog(
            id=log_id,
            webhook_id=target.config_id,
            webhook_url=target.url,
            event=payload.get('evento'),
            payload=payload,
            success=False,
            retry_count=attempt,
            retry_of=retry_of,
            timestamp=utcnow(),
        )

        if not target.url:
            log.message = MESSAGE_NO_URL
            logger.warning(f"Webhook {target.config_id} skipped: {MESSAGE_NO_URL}")
            self._record(log, log_id)
            return log

        success, status_code, message = self._post(target, payload)
        log.success = success
        log.status_code = status_code
        log.message = message

        context = {"webhook_id": target.config_id, "event": log.event, "attempt": attempt}
        if success:
            logger.info(f"Webhook {target.url} attempt {attempt}: {message}", extra=context)
        else:
            logger.warning(f"Webhook {target.url} attempt {attempt} failed: {message}", extra=context)

        self._record(log, log_id)

        if not success:
            self._schedule_retry(target, payload, attempt, log_id)
        return log

    def _post(self, target: DeliveryTarget, payload: dict):
        """Returns (success, status_code, message); never raises"""
        headers = target.request_headers()
        logger.debug(f"POST {target.url} headers={sanitize_headers(headers)}")
        try:
            response = self.http.post(
                target.url,
                data=json.dumps(payload, default=str),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.Timeout:
            return False, None, f"request timed out after {self.timeout} seconds"
        except requests.RequestException as e:
            return False, None, f"network error: {e}"
        except Exception as e:
            logger.error(f"Unexpected error posting webhook to {target.url}: {e}")
            return False, None, f"unexpected error: {e}"

        status_code = response.status_code
        if status_code < 400:
            return True, status_code, MESSAGE_DELIVERED
        return False, status_code, f"HTTP error status {status_code}"

    def _record(self, log: WebhookLog, log_id: str):
        try:
            self.log_repo.append(log)
        except Exception as e:
            logger.error(f"Could not store webhook log {log_id}: {e}")

    def _schedule_retry(self, target: DeliveryTarget, payload: dict, attempt: int, log_id: str):
        if attempt >= target.max_retries:
            if target.max_retries:
                logger.warning(f"Webhook {target.url} gave up after {attempt + 1} attempts")
            return

        delay_ms = compute_backoff_delay(attempt)
        logger.info(f"Retrying webhook {target.url} in {delay_ms:.0f} ms (attempt {attempt + 1})")
        self.scheduler.schedule(
            target.config_id or target.url,
            delay_ms / 1000.0,
            self._in_app_context,
            self._attempt, target, payload, attempt + 1, log_id,
        )
