"""
RetryScheduler on real timers (short delays).
"""

import threading

from app.buisness.webhooks.retry_scheduler import RetryScheduler


def test_callback_runs_after_delay():
    scheduler = RetryScheduler()
    fired = threading.Event()
    received = []

    def callback(value):
        received.append(value)
        fired.set()

    scheduler.schedule('cfg', 0.01, callback, 'payload')

    assert fired.wait(2)
    assert received == ['payload']


def test_cancel_drops_pending_timers_for_key_only():
    scheduler = RetryScheduler()
    kept = threading.Event()
    dropped = threading.Event()

    scheduler.schedule('delete-me', 0.2, dropped.set)
    scheduler.schedule('delete-me', 0.2, dropped.set)
    scheduler.schedule('keep-me', 0.05, kept.set)

    assert scheduler.pending('delete-me') == 2
    assert scheduler.cancel('delete-me') == 2
    assert scheduler.pending('delete-me') == 0

    assert kept.wait(2)
    assert not dropped.wait(0.4)


def test_cancel_all():
    scheduler = RetryScheduler()
    fired = threading.Event()
    scheduler.schedule('a', 0.1, fired.set)
    scheduler.schedule('b', 0.1, fired.set)

    scheduler.cancel_all()

    assert not fired.wait(0.3)
    assert scheduler.pending('a') == 0
