"""
User-facing notifications

Business contexts announce successful mutations through a Notifier. The
plain Notifier only logs; FlashNotifier also queues the message with
flask.flash while a request is active so the JSON API can return it.
"""

from flask import flash, has_request_context
from app.logger import get_logger

logger = get_logger("purchasing.services.notifier")


class Notifier:
    """Fire-and-forget message sink"""

    def notify(self, level: str, message: str):
        log_level = {'error': 'error', 'warning': 'warning'}.get(level, 'info')
        getattr(logger, log_level)(f"[{level}] {message}")

    def success(self, message: str):
        self.notify('success', message)

    def info(self, message: str):
        self.notify('info', message)

    def warning(self, message: str):
        self.notify('warning', message)

    def error(self, message: str):
        self.notify('error', message)


class FlashNotifier(Notifier):

    def notify(self, level: str, message: str):
        super().notify(level, message)
        if has_request_context():
            flash(message, level)


class RecordingNotifier(Notifier):
    """Keeps (level, message) pairs in memory; used by library callers and tests"""

    def __init__(self):
        self.messages = []

    def notify(self, level: str, message: str):
        super().notify(level, message)
        self.messages.append((level, message))
