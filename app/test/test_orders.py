"""
Order aggregate: validation, ownership, pending-only edits, deletion policy
and the events emitted for each mutation.
"""

import pytest

from app.buisness.errors import AuthenticationError, ForbiddenError, NotFoundError, ValidationError
from app.buisness.orders.status import OrderStatus
from app.buisness.webhooks.events import PEDIDO_CANCELADO, PEDIDO_CRIADO, STATUS_ATUALIZADO


ORDER_DATA = {
    'name': 'Notebook Dell XPS',
    'quantity': 1,
    'reason': 'Substituição de equipamento antigo',
    'department': 'TI',
    'itemLink': 'https://www.dell.com/pt-br',
}


def subscribe_all(state, url='https://hooks.example.com/orders'):
    return state.webhooks.save({
        'name': 'all events',
        'url': url,
        'events': [PEDIDO_CRIADO, STATUS_ATUALIZADO, PEDIDO_CANCELADO],
    })


def sent_events(http):
    import json
    return [json.loads(call.kwargs['data'])['evento'] for call in http.post.call_args_list]


def test_create_order_sets_author_and_defaults(state, member):
    order = state.orders.create_order(ORDER_DATA, member)

    assert order.status == OrderStatus.PENDENTE
    assert order.created_by == member.id
    assert order.created_by_name == 'Regular User'
    assert order.item_link == 'https://www.dell.com/pt-br'
    assert order.created_at == order.updated_at
    assert state.orders.get_order_by_id(order.id) is order


def test_create_order_requires_user(state):
    with pytest.raises(AuthenticationError):
        state.orders.create_order(ORDER_DATA, None)


@pytest.mark.parametrize('field, value', [
    ('name', '   '),
    ('quantity', 0),
    ('quantity', -3),
    ('quantity', 'many'),
    ('quantity', 1.5),
    ('reason', ''),
    ('department', None),
    ('item_link', 'ftp://example.com/file'),
])
def test_create_order_rejects_invalid_field(state, member, field, value):
    data = dict(ORDER_DATA)
    data.pop('itemLink')
    data[field] = value

    with pytest.raises(ValidationError) as excinfo:
        state.orders.create_order(data, member)
    assert excinfo.value.field == field


def test_invalid_order_is_not_persisted_and_not_published(state, member, http):
    subscribe_all(state)

    with pytest.raises(ValidationError):
        state.orders.create_order(dict(ORDER_DATA, quantity=0), member)

    assert state.orders.filter_by_status() == []
    http.post.assert_not_called()


def test_create_order_publishes_order_created(state, member, http):
    subscribe_all(state)
    order = state.orders.create_order(ORDER_DATA, member)

    assert sent_events(http) == [PEDIDO_CRIADO]
    log = state.engine.list_logs()[0]
    assert log.payload['pedido_id'] == order.id
    assert log.payload['solicitante'] == 'Regular User'
    assert log.payload['quantidade'] == 1


def test_update_unknown_order(state, member):
    with pytest.raises(NotFoundError):
        state.orders.update_order('missing', {'reason': 'x'}, member)


def test_non_owner_cannot_update(state, member, other_member):
    order = state.orders.create_order(ORDER_DATA, member)

    with pytest.raises(ForbiddenError):
        state.orders.update_order(order.id, {'reason': 'mine now'}, other_member)


def test_non_owner_status_change_hits_ownership_check(state, member, other_member, admin):
    order = state.orders.create_order(ORDER_DATA, member)
    state.orders.update_order_status(order.id, OrderStatus.AGUARDANDO, admin)

    with pytest.raises(ForbiddenError) as excinfo:
        state.orders.update_order(order.id, {'status': OrderStatus.RESOLVIDO}, other_member)
    assert 'Not authorized' in excinfo.value.message


def test_owner_edits_pending_then_locked_after_resolution(state, member, admin):
    """Owner edits while pending; once resolved only admins may edit fields"""
    order = state.orders.create_order(ORDER_DATA, member)

    updated = state.orders.update_order(order.id, {'reason': 'Equipamento quebrou'}, member)
    assert updated.reason == 'Equipamento quebrou'

    state.orders.update_order_status(order.id, OrderStatus.RESOLVIDO, admin)

    with pytest.raises(ForbiddenError) as excinfo:
        state.orders.update_order(order.id, {'reason': 'De novo'}, member)
    assert excinfo.value.message == 'can only edit pending orders'


def test_owner_may_change_only_status_on_non_pending_order(state, member, admin):
    order = state.orders.create_order(ORDER_DATA, member)
    state.orders.update_order_status(order.id, OrderStatus.AGUARDANDO, admin)

    updated = state.orders.update_order(order.id, {'status': OrderStatus.RESOLVIDO}, member)
    assert updated.status == OrderStatus.RESOLVIDO


def test_unchanged_values_do_not_count_as_changes(state, member, admin):
    order = state.orders.create_order(ORDER_DATA, member)
    state.orders.update_order_status(order.id, OrderStatus.AGUARDANDO, admin)

    updated = state.orders.update_order(
        order.id,
        {'name': order.name, 'reason': order.reason, 'status': OrderStatus.RESOLVIDO},
        member,
    )
    assert updated.status == OrderStatus.RESOLVIDO


def test_resubmitted_form_values_are_compared_after_cleaning(state, member, admin):
    """String quantities, padded text and an empty link match the stored values"""
    order = state.orders.create_order(dict(ORDER_DATA, quantity=2, itemLink=None), member)
    state.orders.update_order_status(order.id, OrderStatus.RESOLVIDO, admin)

    updated = state.orders.update_order(order.id, {
        'name': order.name,
        'quantity': '2',
        'reason': f'  {order.reason} ',
        'department': order.department,
        'itemLink': '',
        'status': OrderStatus.RESOLVIDO,
    }, member)

    assert updated.quantity == 2
    assert updated.item_link is None

    with pytest.raises(ForbiddenError):
        state.orders.update_order(order.id, {'quantity': '3'}, member)


def test_admin_edits_any_field_regardless_of_status(state, member, admin):
    order = state.orders.create_order(ORDER_DATA, member)
    state.orders.update_order_status(order.id, OrderStatus.RESOLVIDO, admin)

    updated = state.orders.update_order(order.id, {'quantity': 4}, admin)
    assert updated.quantity == 4


def test_quantity_stays_positive_after_update(state, member):
    order = state.orders.create_order(ORDER_DATA, member)

    with pytest.raises(ValidationError):
        state.orders.update_order(order.id, {'quantity': 0}, member)
    assert state.orders.get_order_by_id(order.id).quantity == 1


def test_immutable_and_unknown_fields_are_rejected(state, member):
    order = state.orders.create_order(ORDER_DATA, member)

    with pytest.raises(ValidationError) as excinfo:
        state.orders.update_order(order.id, {'createdBy': 'someone-else'}, member)
    assert excinfo.value.field == 'created_by'

    with pytest.raises(ValidationError) as excinfo:
        state.orders.update_order(order.id, {'priority': 'high'}, member)
    assert excinfo.value.field == 'priority'


def test_resubmitting_id_is_allowed(state, member):
    order = state.orders.create_order(ORDER_DATA, member)
    updated = state.orders.update_order(order.id, {'id': order.id, 'reason': 'Outro motivo'}, member)
    assert updated.reason == 'Outro motivo'


def test_invalid_status_value(state, member, admin):
    order = state.orders.create_order(ORDER_DATA, member)

    with pytest.raises(ValidationError) as excinfo:
        state.orders.update_order_status(order.id, 'cancelado', admin)
    assert excinfo.value.field == 'status'


def test_any_status_jump_is_allowed(state, member, admin):
    order = state.orders.create_order(ORDER_DATA, member)

    state.orders.update_order_status(order.id, OrderStatus.RESOLVIDO, admin)
    state.orders.update_order_status(order.id, OrderStatus.PENDENTE, admin)
    assert state.orders.get_order_by_id(order.id).status == OrderStatus.PENDENTE


def test_update_refreshes_updated_at(state, member):
    order = state.orders.create_order(ORDER_DATA, member)
    created_at = order.created_at

    updated = state.orders.update_order(order.id, {'reason': 'Novo motivo'}, member)
    assert updated.updated_at >= created_at
    assert updated.created_at == created_at


def test_status_event_only_when_status_changes(state, member, admin, http):
    subscribe_all(state)
    order = state.orders.create_order(ORDER_DATA, member)

    state.orders.update_order(order.id, {'reason': 'Outro'}, member)
    state.orders.update_order_status(order.id, OrderStatus.PENDENTE, admin)
    state.orders.update_order_status(order.id, OrderStatus.AGUARDANDO, admin)

    assert sent_events(http) == [PEDIDO_CRIADO, STATUS_ATUALIZADO]
    payload = state.engine.list_logs()[0].payload
    assert payload['status_anterior'] == OrderStatus.PENDENTE
    assert payload['status_novo'] == OrderStatus.AGUARDANDO
    assert payload['atualizado_por'] == 'Admin User'


def test_delete_rules(state, member, other_member, admin):
    order = state.orders.create_order(ORDER_DATA, member)

    with pytest.raises(ForbiddenError):
        state.orders.delete_order(order.id, other_member)

    state.orders.update_order_status(order.id, OrderStatus.AGUARDANDO, admin)
    with pytest.raises(ForbiddenError) as excinfo:
        state.orders.delete_order(order.id, member)
    assert 'pending' in excinfo.value.message

    state.orders.delete_order(order.id, admin)
    assert state.orders.get_order_by_id(order.id) is None


def test_non_owner_delete_forbidden_even_when_pending(state, member, other_member):
    order = state.orders.create_order(ORDER_DATA, member)
    with pytest.raises(ForbiddenError):
        state.orders.delete_order(order.id, other_member)


def test_owner_deletes_pending_order_and_cancel_event_is_sent(state, member, http):
    subscribe_all(state)
    order = state.orders.create_order(ORDER_DATA, member)

    state.orders.delete_order(order.id, member, reason='Compra desnecessária')

    assert sent_events(http) == [PEDIDO_CRIADO, PEDIDO_CANCELADO]
    payload = state.engine.list_logs()[0].payload
    assert payload['motivo_cancelamento'] == 'Compra desnecessária'
    assert payload['cancelado_por'] == 'Regular User'


def test_delete_unknown_order(state, admin):
    with pytest.raises(NotFoundError):
        state.orders.delete_order('missing', admin)


def test_filter_by_status(state, member, admin):
    first = state.orders.create_order(ORDER_DATA, member)
    second = state.orders.create_order(dict(ORDER_DATA, name='Cadeiras'), member)
    state.orders.update_order_status(second.id, OrderStatus.RESOLVIDO, admin)

    assert [o.id for o in state.orders.filter_by_status()] == [first.id, second.id]
    assert [o.id for o in state.orders.filter_by_status(OrderStatus.PENDENTE)] == [first.id]
    assert [o.id for o in state.orders.filter_by_status(OrderStatus.RESOLVIDO)] == [second.id]


def test_webhook_failure_does_not_fail_order_creation(state, member, http):
    subscribe_all(state)
    http.post.side_effect = RuntimeError('boom')

    order = state.orders.create_order(ORDER_DATA, member)

    assert state.orders.get_order_by_id(order.id) is not None
    assert state.engine.list_logs()[0].success is False


def test_success_messages_reach_notifier(state, member, notifier):
    state.orders.create_order(ORDER_DATA, member)
    assert ('success', 'Pedido criado com sucesso') in notifier.messages
