from __future__ import annotations

"""
Health endpoints for Braille Printer.

This blueprint exposes `/healthz`, reporting:
- Overall status ("ok" or "degraded")
- Document store reachability
- Languages with a registered braille encoder
"""

from typing import Any, Dict

from flask import Blueprint

from braille_printer.core import db as dbh
from braille_printer.printing.braille import supported_languages

health_bp = Blueprint("health", __name__)


@health_bp.get("/healthz")
def healthz():
    status: Dict[str, Any] = {"status": "ok", "languages": list(supported_languages())}

    store_ok = dbh.ping()
    status["store_ok"] = store_ok
    if not store_ok:
        status["status"] = "degraded"
        status["reason"] = "store_unavailable"

    return status, 200
