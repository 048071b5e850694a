"""
Core utilities for Braille Printer.

This package groups non-view helpers used across the app:
- config: paths, JSON load/save, PrintQSettings
- logging: Request ID aware logging filters/formatters and root logger config
- auth: credential resolution (bearer tokens, origin allow-list)
- db: SQLite document store and the QueueRecord model

Exports are explicit to keep static analyzers (e.g., Pyright) happy.
"""

from .auth import Credential, TokenAuth, Unauthorized, resolve_credential
from .config import (
    PrintQSettings,
    default_config_path,
    default_db_path,
    get_config_path,
    load_config,
    load_settings,
    save_config,
)
from .db import Query, QueueRecord, RecordNotFound, StoreError, category_for
from .logging import (
    JsonFormatter,
    RequestIdFilter,
    configure_logging,
)

__all__ = [
    # config
    "PrintQSettings",
    "default_config_path",
    "default_db_path",
    "get_config_path",
    "load_config",
    "load_settings",
    "save_config",
    # logging
    "configure_logging",
    "RequestIdFilter",
    "JsonFormatter",
    # auth
    "Credential",
    "TokenAuth",
    "Unauthorized",
    "resolve_credential",
    # db
    "Query",
    "QueueRecord",
    "RecordNotFound",
    "StoreError",
    "category_for",
]
