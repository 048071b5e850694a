"""
Config utilities for Braille Printer.

Responsibilities:
- Resolve the config/database paths with environment and XDG support
- Provide JSON load/save helpers for the optional config file
- Build the PrintQSettings object handed to the queue handlers
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

ENV_PREFIX = "BRAILLEPRINTER_"

DEFAULT_AUTH_KEY = "examplekey"
DEFAULT_ALLOWED_ORIGINS: Tuple[str, ...] = (
    "http://localhost",
    "http://braille-printer.appspot.com",
)


def default_config_path() -> str:
    """
    Resolve the default config path using:
    1) $XDG_CONFIG_HOME/brailleprinter/config.json
    2) ~/.config/brailleprinter/config.json
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return str(Path(xdg) / "brailleprinter" / "config.json")
    return str(Path.home() / ".config" / "brailleprinter" / "config.json")


def default_db_path() -> str:
    """
    Resolve the default database path using:
    1) $XDG_DATA_HOME/brailleprinter/printq.db
    2) ~/.local/share/brailleprinter/printq.db
    """
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return str(Path(xdg) / "brailleprinter" / "printq.db")
    return str(Path.home() / ".local" / "share" / "brailleprinter" / "printq.db")


def get_config_path() -> str:
    """
    Return the config path honoring BRAILLEPRINTER_CONFIG_PATH override.
    """
    return os.environ.get(f"{ENV_PREFIX}CONFIG_PATH", default_config_path())


def load_config(path: Optional[str] = None) -> Optional[dict[str, Any]]:
    """
    Load the JSON config if it exists; return None if missing.

    Raises:
        json.JSONDecodeError if the file exists but contains invalid JSON.
        OSError for I/O errors other than missing file.
    """
    cfg_path = Path(path or get_config_path())
    if not cfg_path.exists():
        return None
    with cfg_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def save_config(data: dict[str, Any], path: Optional[str] = None) -> None:
    """
    Save the JSON config, creating parent directories as needed.

    Writes atomically by using a temporary file and os.replace().
    Raises OSError on I/O failures.
    """
    cfg_path = Path(path or get_config_path())
    cfg_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = cfg_path.with_suffix(cfg_path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, cfg_path)


@dataclass(frozen=True)
class PrintQSettings:
    """
    Settings for the print queue handlers.

    example_auth_key: placeholder owner key used for origin-authorized
        submissions and as the default `key` on reads.
    allowed_origins: substrings accepted in the Referer/Origin header.
    max_query: cap on records returned by the listing endpoint.
    canvas_size: initial SVG drawing surface width; grows to fit the widest row.
    max_content_length: request body cap in bytes (413 above it); 0 disables it.
    strict_lang: reject unknown `lang` values with 400 instead of storing
        an empty encoding.
    jwt_secret: HS256 secret for bearer tokens; token auth is disabled when unset.
    db_path: SQLite file backing the document store.
    """

    example_auth_key: str = DEFAULT_AUTH_KEY
    allowed_origins: Tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS
    max_query: int = 100
    canvas_size: int = 240
    max_content_length: int = 1024 * 1024
    strict_lang: bool = False
    jwt_secret: Optional[str] = None
    db_path: str = field(default_factory=default_db_path)


def _coerce(name: str, raw: Any) -> Any:
    if name in ("max_query", "canvas_size", "max_content_length"):
        return int(raw)
    if name == "strict_lang":
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() in ("1", "true", "yes", "on")
    if name == "allowed_origins":
        if isinstance(raw, str):
            return tuple(o.strip() for o in raw.split(",") if o.strip())
        return tuple(raw)
    return raw


def _from_env() -> dict[str, Any]:
    values: dict[str, Any] = {}
    for f in fields(PrintQSettings):
        raw = os.environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is not None:
            values[f.name] = raw
    return values


def load_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    config_path: Optional[str] = None,
) -> PrintQSettings:
    """
    Build PrintQSettings from defaults, the JSON config file, the
    BRAILLEPRINTER_* environment, then explicit overrides (last wins).

    Unknown keys in the config file or overrides are ignored.
    Raises ValueError when a numeric setting is not an integer.
    """
    known = {f.name for f in fields(PrintQSettings)}
    merged: dict[str, Any] = {}
    for source in (load_config(config_path) or {}, _from_env(), dict(overrides or {})):
        for k, v in source.items():
            if k in known and v is not None:
                merged[k] = _coerce(k, v)

    settings = replace(PrintQSettings(), **merged)
    if settings.max_query < 1:
        raise ValueError("max_query must be positive")
    if settings.max_content_length < 0:
        raise ValueError("max_content_length must not be negative")
    return settings


__all__ = [
    "DEFAULT_ALLOWED_ORIGINS",
    "DEFAULT_AUTH_KEY",
    "PrintQSettings",
    "default_config_path",
    "default_db_path",
    "get_config_path",
    "load_config",
    "load_settings",
    "save_config",
]
