"""
Pytest configuration and fixtures

Two worlds are provided:
- `state`: an in-memory ApplicationState with a fake HTTP client, an inline
  executor and a recording retry scheduler (no threads, no network)
- `app` / `client`: the Flask application on an in-memory SQLite database
  with CSRF and rate limiting disabled
"""

from concurrent.futures import Future
from unittest.mock import MagicMock

import pytest

from app import create_app
from app import db as _db
from app.buisness.core.application_state import ApplicationState
from app.services.notifier import RecordingNotifier


class InlineExecutor:
    """Runs submitted work immediately in the calling thread"""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait=True):
        pass


class RecordingScheduler:
    """Stores retries instead of starting timers; tests fire them explicitly"""

    def __init__(self):
        self.scheduled = []
        self.cancelled = []

    def schedule(self, key, delay_seconds, callback, *args):
        self.scheduled.append((key, delay_seconds, callback, args))

    def cancel(self, key):
        self.cancelled.append(key)
        remaining = [entry for entry in self.scheduled if entry[0] != key]
        dropped = len(self.scheduled) - len(remaining)
        self.scheduled = remaining
        return dropped

    def cancel_all(self):
        self.scheduled = []

    def pending(self, key):
        return sum(1 for entry in self.scheduled if entry[0] == key)

    def run_next(self):
        key, delay_seconds, callback, args = self.scheduled.pop(0)
        return callback(*args)

    def run_all(self):
        results = []
        while self.scheduled:
            results.append(self.run_next())
        return results


def http_response(status_code):
    response = MagicMock()
    response.status_code = status_code
    return response


def fake_http(status_code=200):
    http = MagicMock()
    http.post.return_value = http_response(status_code)
    return http


@pytest.fixture
def http():
    return fake_http(200)


@pytest.fixture
def scheduler():
    return RecordingScheduler()


@pytest.fixture
def executor():
    return InlineExecutor()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def state(http, scheduler, executor, notifier):
    """In-memory application state"""
    app_state = ApplicationState.in_memory(
        notifier=notifier,
        http=http,
        scheduler=scheduler,
        executor=executor,
    )
    yield app_state
    app_state.shutdown()


@pytest.fixture
def admin(state):
    """First registered account: approved admin"""
    return state.users.register('Admin User', 'admin@example.com', 'admin123')


@pytest.fixture
def member(state, admin):
    """Approved regular user"""
    user = state.users.register('Regular User', 'user@example.com', 'user123')
    state.users.approve(user.id)
    return user


@pytest.fixture
def other_member(state, admin):
    user = state.users.register('Other User', 'other@example.com', 'other123')
    state.users.approve(user.id)
    return user


@pytest.fixture
def app():
    """Create Flask application for testing"""
    app = create_app({
        'SECRET_KEY': 'test-secret-key',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'TESTING': True,
        'WTF_CSRF_ENABLED': False,
        'RATELIMIT_ENABLED': False,
        'SESSION_COOKIE_SECURE': False,
        'REMEMBER_COOKIE_SECURE': False,
    })

    engine = app.extensions['purchasing'].engine
    engine.http = fake_http(200)
    engine.scheduler = RecordingScheduler()
    engine.executor = InlineExecutor()
    # Inline deliveries share the request's app context and session
    engine.app = None

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    """Create Flask test client"""
    return app.test_client()


def register(client, name, email, password):
    return client.post('/api/auth/register', json={'name': name, 'email': email, 'password': password})


def login(client, email, password):
    return client.post('/api/auth/login', json={'email': email, 'password': password})


@pytest.fixture
def admin_client(client):
    """Client logged in as the first (admin) account"""
    register(client, 'Admin User', 'admin@example.com', 'admin123')
    response = login(client, 'admin@example.com', 'admin123')
    assert response.status_code == 200
    return client
