#!/usr/bin/env python3
#USE VENV: source venv/bin/activate
"""
Run script for the purchasing application
"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from app import create_app  # noqa: E402
from app.build import build_database  # noqa: E402
from app.logger import get_logger  # noqa: E402

# Note: run 'python generate_env.py' to create a .env file with a secure SECRET_KEY.

app = create_app()
logger = get_logger("purchasing.run")


def parse_arguments():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Purchasing and Inventory Management')
    parser.add_argument('--build-only', action='store_true',
                        help='Create the database tables and exit without starting the web server')
    parser.add_argument('--no-sample-data', action='store_false', dest='enable_sample_data',
                        help='Do not insert the sample inventory')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()

    logger.debug("Starting purchasing application...")

    with app.app_context():
        build_database(enable_sample_data=args.enable_sample_data)

    if args.build_only:
        logger.debug("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')

    # USE_RELOADER: Enable/disable auto-reloader (default: False in production)
    use_reloader = os.environ.get('USE_RELOADER', 'False').lower() in ('true', '1', 'yes', 'on')

    # FLASK_HOST: Server host (default: 127.0.0.1 for security)
    host = os.environ.get('FLASK_HOST', '127.0.0.1')

    # FLASK_PORT: Server port (default: 5000)
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    try:
        app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
    finally:
        app.extensions['purchasing'].shutdown()
