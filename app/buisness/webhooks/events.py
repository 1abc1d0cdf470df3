"""
Webhook event kinds and payload builders

Every payload is a flat JSON object whose `evento` key names the event kind.
Field names are part of the public wire format and stay in Portuguese.
"""

from app.utils.timestamps import isoformat, utcnow

PEDIDO_CRIADO = 'pedido_criado'
STATUS_ATUALIZADO = 'status_atualizado'
PEDIDO_CANCELADO = 'pedido_cancelado'
CONTA_CRIADA = 'conta_criada'

EVENT_KINDS = (PEDIDO_CRIADO, STATUS_ATUALIZADO, PEDIDO_CANCELADO, CONTA_CRIADA)

EVENT_LABELS = {
    PEDIDO_CRIADO: 'Novo Pedido Criado',
    STATUS_ATUALIZADO: 'Status do Pedido Atualizado',
    PEDIDO_CANCELADO: 'Pedido Cancelado',
    CONTA_CRIADA: 'Nova Conta Criada',
}

TEST_MESSAGE = 'Este é um teste de webhook do sistema de pedidos'


def order_created_payload(order):
    return {
        'evento': PEDIDO_CRIADO,
        'pedido_id': order.id,
        'solicitante': order.created_by_name,
        'item': order.name,
        'quantidade': order.quantity,
        'status': order.status,
        'departamento': order.department,
        'motivo': order.reason,
        'data_criacao': isoformat(order.created_at),
    }


def status_updated_payload(order, previous_status, updated_by):
    return {
        'evento': STATUS_ATUALIZADO,
        'pedido_id': order.id,
        'status_anterior': previous_status,
        'status_novo': order.status,
        'solicitante': order.created_by_name,
        'item': order.name,
        'atualizado_por': updated_by,
        'data_atualizacao': isoformat(order.updated_at),
    }


def order_cancelled_payload(order, cancelled_by, reason=None):
    return {
        'evento': PEDIDO_CANCELADO,
        'pedido_id': order.id,
        'solicitante': order.created_by_name,
        'item': order.name,
        'motivo_cancelamento': reason or 'Pedido excluído',
        'cancelado_por': cancelled_by,
        'data_cancelamento': isoformat(utcnow()),
    }


def account_created_payload(user):
    return {
        'evento': CONTA_CRIADA,
        'usuario_id': user.id,
        'nome': user.name,
        'email': user.email,
        'perfil': user.role,
        'data_criacao': isoformat(user.created_at),
    }


def build_test_payload():
    """Synthetic order-created payload used to verify a configuration"""
    now = isoformat(utcnow())
    return {
        'evento': PEDIDO_CRIADO,
        'teste': True,
        'mensagem': TEST_MESSAGE,
        'pedido_id': 'teste-123',
        'solicitante': 'Usuário de Teste',
        'item': 'Item de Teste',
        'quantidade': 1,
        'status': 'pendente',
        'departamento': 'TI',
        'motivo': 'Teste de integração',
        'data_criacao': now,
    }
