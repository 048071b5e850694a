"""
Braille Printer package

This module provides an application factory with minimal wiring:
- Configures logging via braille_printer.core.logging
- Builds PrintQSettings (defaults, config file, environment, overrides)
- Creates a Flask app and attaches the PrintQueue service as an extension
- Registers the print queue and health blueprints
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any, Optional

from flask import Flask, g

from braille_printer.core import db as _db
from braille_printer.core.config import load_settings
from braille_printer.core.logging import configure_logging
from braille_printer.printing.printq import PrintQueue
from braille_printer.web import health_bp, printq_bp


def _set_request_id() -> None:
    """
    Assign a request ID for logging if not set by a filter elsewhere.
    """
    g.request_id = getattr(g, "request_id", uuid.uuid4().hex)


def create_app(
    config_overrides: Optional[Mapping[str, Any]] = None,
    queue: Optional[PrintQueue] = None,
) -> Flask:
    """
    Application factory.

    Parameters:
    - config_overrides: PrintQSettings fields (e.g. db_path, max_query, jwt_secret)
      and/or Flask config keys (upper-case, e.g. TESTING) applied after defaults
    - queue: a prebuilt PrintQueue, e.g. with stub encoder/renderer; its settings win

    Returns:
    - Flask app instance
    """
    overrides = dict(config_overrides or {})
    flask_overrides = {k: v for k, v in overrides.items() if k.isupper()}
    settings_overrides = {k: v for k, v in overrides.items() if not k.isupper()}

    configure_logging()

    app = Flask("braille_printer")
    app.url_map.strict_slashes = False

    if queue is None:
        queue = PrintQueue(load_settings(settings_overrides))
    app.config["MAX_CONTENT_LENGTH"] = queue.settings.max_content_length or None
    app.config["MAX_FORM_MEMORY_SIZE"] = queue.settings.max_content_length or None
    app.extensions["printq"] = queue
    app.config["PRINTQ_DB_PATH"] = queue.settings.db_path

    _db.init_app(app)

    @app.before_request
    def _before_request():
        _set_request_id()

    app.register_blueprint(printq_bp)
    app.register_blueprint(health_bp)

    if flask_overrides:
        app.config.update(flask_overrides)

    app.logger.info("Braille Printer app created (store=%s)", queue.settings.db_path)
    return app


__all__ = ["create_app"]
