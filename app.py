#!/usr/bin/env python3
"""
Run script for the event site
"""

import argparse
import os
import sys
from dotenv import load_dotenv

# Load environment variables from .env file before the app reads them
load_dotenv()

from eventsite import create_app
from eventsite.build import build_database
from eventsite.logger import get_logger

logger = get_logger("eventsite.run")


def parse_arguments():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Event registration site')
    parser.add_argument('--build-only', action='store_true',
                        help='Build database tables and the admin user, then exit without starting the server')
    parser.add_argument('--demo-data', action='store_true',
                        help='Insert sample events')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()

    app = create_app()
    build_database(app, enable_demo_data=args.demo_data)

    if args.build_only:
        logger.debug("Build completed. Exiting without starting web server.")
        sys.exit(0)

    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')
    use_reloader = os.environ.get('USE_RELOADER', 'False').lower() in ('true', '1', 'yes', 'on')
    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
