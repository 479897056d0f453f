"""
mesplaques PDF service - Application Factory
"""
import logging
import os
from datetime import datetime, timezone
from typing import Callable, Optional

import reportlab
from flask import Flask, jsonify
from config import get_config

# Version info
APP_VERSION = os.environ.get("APP_VERSION", "2024.6")
BUILD_TIME = os.environ.get("BUILD_TIME", "")
GIT_COMMIT = os.environ.get("GIT_COMMIT", "")


def create_app(config_name='default', error_log: Optional[Callable[[str], None]] = None):
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    app.logger.setLevel(getattr(logging, app.config.get("LOG_LEVEL", "INFO"), logging.INFO))

    # Handlers record failures through this callable; tests swap in a list.append
    app.extensions["error_log"] = error_log or app.logger.error

    # Register blueprints
    from app.api import api_bp

    app.register_blueprint(api_bp)

    # Health check endpoint
    @app.route('/healthz')
    def healthz():
        """Health check for load balancers and monitoring"""
        return jsonify({
            "status": "ok",
            "version": app.config.get("APP_VERSION", APP_VERSION),
            "reportlab": reportlab.Version,
            "timestamp": datetime.now(timezone.utc).isoformat()
        })

    # Version endpoint
    @app.route('/version')
    def version():
        """Version and build info"""
        return jsonify({
            "version": app.config.get("APP_VERSION", APP_VERSION),
            "build_time": app.config.get("BUILD_TIME", BUILD_TIME),
            "git_commit": app.config.get("GIT_COMMIT", GIT_COMMIT),
            "features": {
                "png_upload": True,
                "pdf_export": True,
            }
        })

    return app
