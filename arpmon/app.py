"""
Flask application factory for the ARP monitor query API.

Example:
    engine = ScanEngine(config)
    app = create_app(engine, url_base=config.url_base)
"""

import time
from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .api.routes import create_blueprint
from .core.scan_engine import ScanEngine
from .utils.logger import Logger, get_logger


def create_app(engine: ScanEngine, url_base: str = "", logger: Optional[Logger] = None) -> Flask:
    """
    Create the Flask application serving the host table of an engine.

    Args:
        engine: Scan engine whose table is served
        url_base: URL prefix for all routes
        logger: Logger for request logging

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)
    app.extensions['arpmon.engine'] = engine
    api_logger = logger or get_logger("arpmon.api")

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """Unknown paths and methods are answered, never fatal."""
        if e.code >= 500:
            api_logger.error(f"HTTP {e.code}: {e.description}", url=request.path)
        else:
            api_logger.warning(f"HTTP {e.code}: {request.method} {request.path}")
        return jsonify({'error': e.description, 'code': e.code}), e.code

    @app.before_request
    def before_request():
        request.start_time = time.time()
        api_logger.info(f"REQUEST: {request.method} {request.full_path.rstrip('?')}")

    @app.after_request
    def after_request(response):
        duration = time.time() - getattr(request, 'start_time', time.time())
        api_logger.debug(
            f"Response: {response.status_code} ({duration:.3f}s)",
            bytes=response.calculate_content_length()
        )
        return response

    app.register_blueprint(create_blueprint(url_base))
    return app
