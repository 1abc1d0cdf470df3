"""
User administration routes (admin only)
"""

from flask_login import current_user, login_required

from app.buisness.errors import NotFoundError
from app.data.core.user_info.user import User
from app.presentation.routes.api import admin_required, api_bp, json_body, respond, state


@api_bp.route('/users', methods=['GET'])
@login_required
@admin_required
def list_users():
    return respond(state().users.list_users())


@api_bp.route('/users', methods=['POST'])
@login_required
@admin_required
def add_user():
    body = json_body()
    user = state().users.add_user(
        body.get('name'),
        body.get('email'),
        body.get('password'),
        body.get('role') or User.ROLE_USER,
    )
    return respond(user, 201)


@api_bp.route('/users/<user_id>', methods=['GET'])
@login_required
@admin_required
def get_user(user_id):
    user = state().users.get_user(user_id)
    if user is None:
        raise NotFoundError("Usuário não encontrado")
    return respond(user)


@api_bp.route('/users/<user_id>/approve', methods=['POST'])
@login_required
@admin_required
def approve_user(user_id):
    return respond(state().users.approve(user_id))


@api_bp.route('/users/<user_id>/reject', methods=['POST'])
@login_required
@admin_required
def reject_user(user_id):
    return respond(state().users.reject(user_id))


@api_bp.route('/users/<user_id>/password', methods=['PUT'])
@login_required
@admin_required
def change_user_password(user_id):
    state().users.change_password(user_id, json_body().get('password'))
    return respond({'changed': True})


@api_bp.route('/users/<user_id>', methods=['DELETE'])
@login_required
@admin_required
def remove_user(user_id):
    state().users.remove_user(user_id, current_user.id)
    return respond({'deleted': user_id})
