"""
Webhook settings routes (admin only): configurations, test sends, delivery log
"""

from flask import request
from flask_login import login_required

from app.buisness.core.data_insertion_mixin import to_snake
from app.buisness.errors import NotFoundError
from app.buisness.webhooks.events import EVENT_KINDS, EVENT_LABELS
from app.data.webhooks.webhook_config import WebhookConfig
from app.presentation.routes.api import admin_required, api_bp, json_body, respond, state


def _get_config_or_404(config_id):
    config = state().webhooks.get(config_id)
    if config is None:
        raise NotFoundError("Webhook não encontrado")
    return config


@api_bp.route('/webhooks/events', methods=['GET'])
@login_required
@admin_required
def list_event_kinds():
    return respond([{'value': kind, 'label': EVENT_LABELS[kind]} for kind in EVENT_KINDS])


@api_bp.route('/webhooks', methods=['GET'])
@login_required
@admin_required
def list_webhooks():
    return respond(state().webhooks.list())


@api_bp.route('/webhooks', methods=['POST'])
@login_required
@admin_required
def create_webhook():
    body = dict(json_body())
    body.pop('id', None)
    return respond(state().webhooks.save(body), 201)


@api_bp.route('/webhooks/test', methods=['POST'])
@login_required
@admin_required
def test_unsaved_webhook():
    """Send the test payload to a configuration that has not been saved yet"""
    body = {to_snake(key): value for key, value in json_body().items()}
    config = WebhookConfig(
        id=None,
        name=body.get('name') or 'teste',
        url=body.get('url') or '',
        headers=body.get('headers') or {},
        max_retries=0,
    )
    return respond(state().engine.test(config))


@api_bp.route('/webhooks/logs', methods=['GET'])
@login_required
@admin_required
def list_webhook_logs():
    limit = request.args.get('limit', type=int)
    return respond(state().engine.list_logs(limit))


@api_bp.route('/webhooks/logs', methods=['DELETE'])
@login_required
@admin_required
def clear_webhook_logs():
    state().engine.clear_logs()
    return respond({'cleared': True})


@api_bp.route('/webhooks/<config_id>', methods=['GET'])
@login_required
@admin_required
def get_webhook(config_id):
    return respond(_get_config_or_404(config_id))


@api_bp.route('/webhooks/<config_id>', methods=['PUT', 'PATCH'])
@login_required
@admin_required
def update_webhook(config_id):
    config = _get_config_or_404(config_id)
    body = {
        'name': config.name,
        'url': config.url,
        'events': config.events,
        'enabled': config.enabled,
        'headers': config.headers,
        'max_retries': config.max_retries,
    }
    body.update({to_snake(key): value for key, value in json_body().items()})
    body['id'] = config_id
    return respond(state().webhooks.save(body))


@api_bp.route('/webhooks/<config_id>', methods=['DELETE'])
@login_required
@admin_required
def delete_webhook(config_id):
    state().webhooks.delete(config_id)
    return respond({'deleted': config_id})


@api_bp.route('/webhooks/<config_id>/test', methods=['POST'])
@login_required
@admin_required
def test_webhook(config_id):
    return respond(state().engine.test(_get_config_or_404(config_id)))
