"""
Authentication routes: registration, login/logout, password reset
"""

from flask import current_app, jsonify
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf

from app import limiter
from app.buisness.errors import NotFoundError
from app.data.core.user_info.password_validator import PasswordValidator
from app.logger import get_logger
from app.presentation.routes.api import api_bp, json_body, respond, state

logger = get_logger("purchasing.routes.api.auth")


@api_bp.route('/auth/csrf-token', methods=['GET'])
def csrf_token():
    return jsonify({'csrfToken': generate_csrf()})


@api_bp.route('/auth/password-requirements', methods=['GET'])
def password_requirements():
    return respond({
        'minLength': PasswordValidator.MIN_LENGTH,
        'maxLength': PasswordValidator.MAX_LENGTH,
        'text': PasswordValidator.get_requirements_text(),
    })


@api_bp.route('/auth/register', methods=['POST'])
@limiter.limit("5 per minute")
def register():
    body = json_body()
    user = state().users.register(body.get('name'), body.get('email'), body.get('password'))
    return respond(user, 201)


@api_bp.route('/auth/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    body = json_body()
    user = state().users.authenticate(body.get('email'), body.get('password'))
    login_user(user, remember=bool(body.get('remember')))
    return respond(user)


@api_bp.route('/auth/logout', methods=['POST'])
@login_required
def logout():
    logger.info(f"User logged out: {current_user.email}")
    logout_user()
    return respond({'loggedOut': True})


@api_bp.route('/auth/me', methods=['GET'])
@login_required
def me():
    return respond(current_user._get_current_object())


@api_bp.route('/auth/password', methods=['PUT'])
@login_required
def change_own_password():
    state().users.change_password(current_user.id, json_body().get('password'))
    return respond({'changed': True})


@api_bp.route('/auth/password-reset', methods=['POST'])
@limiter.limit("5 per minute")
def request_password_reset():
    email = json_body().get('email')
    data = {'email': email, 'sent': True}
    # Unknown emails get the same response as registered ones
    try:
        token = state().users.request_password_reset(email)
    except NotFoundError:
        logger.info("Password reset requested for an unregistered email")
        return respond(data, 202)
    # No mail transport; the token is only exposed to test and debug runs
    if current_app.config.get('TESTING') or current_app.debug:
        data['resetToken'] = token
    return respond(data, 202)


@api_bp.route('/auth/password-reset/confirm', methods=['POST'])
@limiter.limit("10 per minute")
def confirm_password_reset():
    body = json_body()
    state().users.complete_password_reset(body.get('email'), body.get('token'), body.get('password'))
    return respond({'reset': True})
