"""
Web module for Braille Printer.

Exposes blueprints for:
- Print queue endpoints: printq_bp
- Health endpoint: health_bp
"""

from .health import health_bp
from .printq import printq_bp

__all__ = ["health_bp", "printq_bp"]
