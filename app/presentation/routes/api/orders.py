"""
Order routes
"""

from flask import request
from flask_login import login_required

from app.buisness.errors import NotFoundError
from app.buisness.orders.status import DEPARTMENTS, OrderStatus
from app.presentation.routes.api import acting_user, api_bp, json_body, respond, state


@api_bp.route('/orders', methods=['GET'])
@login_required
def list_orders():
    orders = state().orders.filter_by_status(request.args.get('status'))
    if request.args.get('mine', '').lower() in ('1', 'true', 'yes'):
        user = acting_user()
        orders = [order for order in orders if order.created_by == user.id]
    return respond(orders)


@api_bp.route('/orders/options', methods=['GET'])
@login_required
def order_options():
    return respond({
        'statuses': [{'value': status, 'label': OrderStatus.LABELS[status]} for status in OrderStatus.STATUSES],
        'departments': list(DEPARTMENTS),
    })


@api_bp.route('/orders', methods=['POST'])
@login_required
def create_order():
    order = state().orders.create_order(json_body(), acting_user())
    return respond(order, 201)


@api_bp.route('/orders/<order_id>', methods=['GET'])
@login_required
def get_order(order_id):
    order = state().orders.get_order_by_id(order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found")
    return respond(order)


@api_bp.route('/orders/<order_id>', methods=['PATCH', 'PUT'])
@login_required
def update_order(order_id):
    order = state().orders.update_order(order_id, json_body(), acting_user())
    return respond(order)


@api_bp.route('/orders/<order_id>/status', methods=['PUT'])
@login_required
def update_order_status(order_id):
    order = state().orders.update_order_status(order_id, json_body().get('status'), acting_user())
    return respond(order)


@api_bp.route('/orders/<order_id>', methods=['DELETE'])
@login_required
def delete_order(order_id):
    state().orders.delete_order(order_id, acting_user(), reason=json_body().get('reason'))
    return respond({'deleted': order_id})
