"""
Routes package for the purchasing application
"""

from flask import jsonify
from app.logger import get_logger

logger = get_logger("purchasing.routes")


def init_app(app):
    """Register the route blueprints with the Flask app"""
    from app import login_manager
    from app.presentation.routes.api import api_bp

    logger.debug("Initializing route blueprints")
    app.register_blueprint(api_bp)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Authentication required'}), 401

    logger.info("All route blueprints registered")
