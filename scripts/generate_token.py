#!/usr/bin/env python3
"""
Generate bearer tokens for Braille Printer submissions.

The token's subject becomes the owner key of every record submitted with it.
BRAILLEPRINTER_JWT_SECRET must match the server's secret.

Usage:
    python scripts/generate_token.py [owner_key] [--days N]

Examples:
    python scripts/generate_token.py
    python scripts/generate_token.py front-desk --days 30
"""

import sys
from pathlib import Path

# Add the project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from braille_printer.core.auth import generate_token_cli

if __name__ == "__main__":
    generate_token_cli()
