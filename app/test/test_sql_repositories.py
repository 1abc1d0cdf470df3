"""
SQLAlchemy repositories on the in-memory SQLite database.
"""

import logging

import pytest
from sqlalchemy.exc import IntegrityError

from app.buisness.webhooks.events import PEDIDO_CRIADO
from app.data.core.record_base import new_id
from app.data.core.user_info.user import User
from app.data.repositories.sql import SqlUsersRepo, SqlWebhookConfigRepo, SqlWebhookLogRepo
from app.data.webhooks.webhook_config import WebhookConfig
from app.data.webhooks.webhook_log import WebhookLog


def make_log(index):
    return WebhookLog(
        id=new_id(),
        webhook_id='cfg',
        webhook_url='https://hooks.example.com',
        event=PEDIDO_CRIADO,
        payload={'n': index},
        success=True,
        status_code=200,
        message='delivered successfully',
        retry_count=0,
    )


def test_log_repo_trims_oldest_entries(app):
    repo = SqlWebhookLogRepo(limit=5)

    for index in range(8):
        repo.append(make_log(index))

    assert repo.count() == 5
    assert [log.payload['n'] for log in repo.list()] == [7, 6, 5, 4, 3]
    assert [log.payload['n'] for log in repo.list(2)] == [7, 6]


def test_log_repo_default_limit_is_100(app):
    repo = SqlWebhookLogRepo()
    for index in range(103):
        repo.append(make_log(index))

    logs = repo.list()
    assert repo.count() == 100
    assert logs[0].payload['n'] == 102
    assert logs[-1].payload['n'] == 3


def test_log_repo_clear(app):
    repo = SqlWebhookLogRepo()
    repo.append(make_log(0))
    repo.clear()
    assert repo.count() == 0


def test_log_to_dict_hides_sequence(app):
    repo = SqlWebhookLogRepo()
    repo.append(make_log(0))

    data = repo.list()[0].to_dict()
    assert 'seq' not in data
    assert data['webhookUrl'] == 'https://hooks.example.com'
    assert data['retryCount'] == 0
    assert data['timestamp'].endswith('Z')


def test_config_repo_subscription_filter(app):
    repo = SqlWebhookConfigRepo()
    repo.add(WebhookConfig(name='on', url='https://a.example.com', events=[PEDIDO_CRIADO], enabled=True))
    repo.add(WebhookConfig(name='off', url='https://b.example.com', events=[PEDIDO_CRIADO], enabled=False))

    assert [config.name for config in repo.list_subscribed(PEDIDO_CRIADO)] == ['on']
    assert repo.list_subscribed('conta_criada') == []


def test_user_repo_through_directory(app):
    state = app.extensions['purchasing']
    admin = state.users.register('Admin', 'Admin@Example.com', 'admin123')

    repo = SqlUsersRepo()
    assert repo.get_by_email('admin@example.com').id == admin.id
    assert repo.count() == 1
    assert repo.count_admins() == 1
    assert repo.delete('missing') is False


def test_failed_commit_rolls_back_and_logs_sanitized_error(app, caplog):
    repo = SqlUsersRepo()
    first = User(id=new_id(), name='Ana', email='ana@example.com')
    first.set_password('segredo1')
    repo.add(first)

    duplicate = User(id=new_id(), name='Ana 2', email='ana@example.com')
    duplicate.set_password('segredo2')
    password_hash = duplicate.password_hash
    with caplog.at_level(logging.ERROR, logger='purchasing'):
        with pytest.raises(IntegrityError):
            repo.add(duplicate)

    assert 'Message contains sensitive data' in caplog.text
    assert password_hash not in caplog.text
    assert repo.count() == 1
