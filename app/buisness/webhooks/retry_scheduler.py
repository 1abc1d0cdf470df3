"""
Cancellable retry timers keyed by webhook configuration id
"""

import threading
from app.logger import get_logger

logger = get_logger("purchasing.buisness.webhooks.retry_scheduler")


class RetryScheduler:
    """
    Runs callbacks after a delay on daemon `threading.Timer`s.

    Timers are grouped by key (the webhook config id) so that deleting or
    disabling a configuration can drop every retry still waiting for it.
    A callback that already started is not interrupted.
    """

    def __init__(self):
        self._timers = {}
        self._lock = threading.Lock()

    def schedule(self, key, delay_seconds, callback, *args):
        timer = None

        def run():
            with self._lock:
                group = self._timers.get(key)
                if group is not None:
                    group.discard(timer)
                    if not group:
                        del self._timers[key]
            callback(*args)

        timer = threading.Timer(delay_seconds, run)
        timer.daemon = True
        with self._lock:
            self._timers.setdefault(key, set()).add(timer)
        timer.start()
        return timer

    def cancel(self, key) -> int:
        """Cancel every pending timer for key; returns how many were dropped"""
        with self._lock:
            timers = self._timers.pop(key, set())
        for timer in timers:
            timer.cancel()
        if timers:
            logger.info(f"Cancelled {len(timers)} pending webhook retries for {key}")
        return len(timers)

    def cancel_all(self):
        with self._lock:
            keys = list(self._timers)
        for key in keys:
            self.cancel(key)

    def pending(self, key) -> int:
        with self._lock:
            return len(self._timers.get(key, ()))
