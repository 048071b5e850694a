#!/usr/bin/env python3
"""
Braille Printer - Flask print-queue service
Clients submit text, the service stores braille and an SVG drawing for printers to fetch.
"""

import os

from braille_printer import create_app

app = create_app()

if __name__ == "__main__":
    host = os.environ.get("BRAILLEPRINTER_HOST", "0.0.0.0")
    port = int(os.environ.get("BRAILLEPRINTER_PORT", "5000"))
    app.logger.info("Starting Braille Printer on http://%s:%d", host, port)
    app.logger.info("Press Ctrl+C to stop the server")
    app.run(host=host, port=port, debug=False)
