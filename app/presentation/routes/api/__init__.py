"""
JSON API blueprint

Thin layer over the business contexts: parses request bodies, passes the
logged-in user along, maps domain errors to HTTP statuses. No business
rules live here.
"""

from functools import wraps

from flask import Blueprint, current_app, get_flashed_messages, jsonify, request
from flask_login import current_user

from app.buisness.errors import (
    AuthenticationError,
    ConflictError,
    DomainError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    PendingApprovalError,
    RejectedError,
    SelfRemovalError,
    ValidationError,
)
from app.logger import get_logger
from app.utils.logging_sanitizer import sanitize_dict

api_bp = Blueprint('api', __name__, url_prefix='/api')
logger = get_logger("purchasing.routes.api")

# Most specific first
ERROR_STATUS = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ForbiddenError, 403),
    (ConflictError, 409),
    (InvalidCredentialsError, 401),
    (PendingApprovalError, 403),
    (RejectedError, 403),
    (AuthenticationError, 401),
    (SelfRemovalError, 400),
)


def state():
    """ApplicationState of the running app"""
    return current_app.extensions['purchasing']


def acting_user():
    if not current_user.is_authenticated:
        return None
    return current_user._get_current_object()


def json_body():
    return request.get_json(silent=True) or {}


def serialize(value):
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    return value


def respond(data=None, status=200):
    """JSON envelope carrying the payload and any notifier messages"""
    body = {'data': serialize(data)}
    messages = get_flashed_messages(with_categories=True)
    if messages:
        body['messages'] = [{'level': level, 'message': message} for level, message in messages]
    return jsonify(body), status


def admin_required(f):
    """Decorator to require admin access"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({'error': 'Authentication required'}), 401
        if not current_user.is_admin:
            logger.warning(f"Non-admin user {current_user.email} attempted to access {request.path}")
            return jsonify({'error': 'Administrator access required'}), 403
        return f(*args, **kwargs)
    return decorated_function


@api_bp.errorhandler(DomainError)
def handle_domain_error(error):
    status = next((code for error_class, code in ERROR_STATUS if isinstance(error, error_class)), 400)
    body = {'error': error.message}
    field = getattr(error, 'field', None)
    if field:
        body['field'] = field
    logger.info(f"{request.method} {request.path} -> {status} {type(error).__name__}: {error.message}")
    if isinstance(error, ValidationError):
        logger.debug(f"Rejected body: {sanitize_dict(request.get_json(silent=True) or {})}")
    return jsonify(body), status


from . import auth, orders, users, webhooks, inventory  # noqa: E402,F401
