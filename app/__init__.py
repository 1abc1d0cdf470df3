from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from app.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per day", "200 per hour"],
    storage_uri="memory://"  # Use Redis in production for distributed systems
)


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(config=None):
    """
    Application factory.

    Args:
        config: Optional mapping applied on top of the environment-derived
            configuration (tests pass an in-memory database here).
    """
    from pathlib import Path

    app = Flask(__name__)

    # Get singleton logger
    logger = get_logger("purchasing")
    logger.info("Initializing Flask application")

    # SECURITY: Require SECRET_KEY - no fallback
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')

    # Prefer an explicit DATABASE_URL env var; otherwise keep the SQLite
    # database inside the project's `instance/` directory.
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        instance_dir = Path(__file__).parent.parent / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'purchasing.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Session cookie security configuration
    app.config['SESSION_COOKIE_SECURE'] = _env_flag('SESSION_COOKIE_SECURE', 'True')
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.config['PERMANENT_SESSION_LIFETIME'] = int(os.environ.get('PERMANENT_SESSION_LIFETIME', '3600'))
    app.config['REMEMBER_COOKIE_SECURE'] = _env_flag('REMEMBER_COOKIE_SECURE', 'True')
    app.config['REMEMBER_COOKIE_HTTPONLY'] = True
    app.config['REMEMBER_COOKIE_DURATION'] = int(os.environ.get('REMEMBER_COOKIE_DURATION', '86400'))
    app.config['RATELIMIT_ENABLED'] = _env_flag('RATELIMIT_ENABLED', 'True')

    # Webhook delivery and account settings
    app.config['WEBHOOK_TIMEOUT_SECONDS'] = float(os.environ.get('WEBHOOK_TIMEOUT_SECONDS', '10'))
    app.config['WEBHOOK_LOG_LIMIT'] = int(os.environ.get('WEBHOOK_LOG_LIMIT', '100'))
    app.config['WEBHOOK_MAX_WORKERS'] = int(os.environ.get('WEBHOOK_MAX_WORKERS', '4'))
    app.config['PASSWORD_RESET_TTL_MINUTES'] = int(os.environ.get('PASSWORD_RESET_TTL_MINUTES', '60'))

    if config:
        app.config.update(config)

    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    logger.debug(f"Database configured: {app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]}")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from app.data.core.user_info.user import User
    from app.data.orders.order import Order
    from app.data.webhooks.webhook_config import WebhookConfig
    from app.data.webhooks.webhook_log import WebhookLog
    from app.data.inventory.product import Product
    from app.data.inventory.supplier import Supplier

    logger.debug("Models imported and registered")

    # Wire the domain contexts against the SQLAlchemy repositories
    from app.buisness.core.application_state import ApplicationState
    from app.services.notifier import FlashNotifier

    state = ApplicationState.from_sqlalchemy(
        app,
        notifier=FlashNotifier(),
        timeout=app.config['WEBHOOK_TIMEOUT_SECONDS'],
        log_limit=app.config['WEBHOOK_LOG_LIMIT'],
        max_workers=app.config['WEBHOOK_MAX_WORKERS'],
        reset_ttl_minutes=app.config['PASSWORD_RESET_TTL_MINUTES'],
    )
    app.extensions['purchasing'] = state

    # Register blueprints
    from app.presentation.routes import init_app as init_routes
    init_routes(app)

    # Add security headers to all responses
    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        return response

    logger.info("Flask application initialization complete")

    return app
