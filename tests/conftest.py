# Ensure the repository root is on sys.path so `braille_printer` can be imported in tests.

import sys
from pathlib import Path
from typing import List, Tuple


def _ensure_repo_root_on_syspath() -> None:
    # This file lives at: <repo_root>/tests/conftest.py
    here = Path(__file__).resolve()
    repo_root = here.parent.parent
    repo_str = str(repo_root)
    if repo_str not in sys.path:
        sys.path.insert(0, repo_str)


_ensure_repo_root_on_syspath()

import pytest  # noqa: E402

from braille_printer import create_app  # noqa: E402
from braille_printer.core import db as dbh  # noqa: E402
from braille_printer.core.db import KIND, Query, QueueRecord  # noqa: E402
from braille_printer.printing import braille  # noqa: E402

ALLOWED_REFERER = {"Referer": "http://localhost:8080/index.html"}


def fake_encode(lang: str):
    """
    Deterministic stand-in for a braille encoder: one cell per character
    (newlines kept), offset by language so ko and en differ.
    """
    offset = 1 if lang == "ko" else 2

    def _encode(text: str) -> Tuple[str, int]:
        out = "".join(ch if ch == "\n" else chr(0x2800 + (ord(ch) + offset) % 64) for ch in text)
        return out, len(text.replace("\n", ""))

    return _encode


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("BRAILLEPRINTER_CONFIG_PATH", str(tmp_path / "missing.json"))
    app = create_app({"db_path": str(tmp_path / "printq.db"), "TESTING": True})
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_encoders(monkeypatch):
    monkeypatch.setitem(braille.ENCODERS, "ko", fake_encode("ko"))
    monkeypatch.setitem(braille.ENCODERS, "en", fake_encode("en"))


def all_records(app) -> List[QueueRecord]:
    with app.app_context():
        return list(dbh.run(Query(KIND).order("created_at")))


def store_record(app, **fields) -> int:
    values = {
        "category": "label",
        "owner_key": "examplekey",
        "original_text": "x",
        "encoded_text": "⠭",
        "rendered_image": b"<svg/>",
    }
    values.update(fields)
    with app.app_context():
        return dbh.put(QueueRecord(**values))
