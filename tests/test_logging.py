import json
import logging

from braille_printer.core.logging import JsonFormatter, RequestIdFilter


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("braille_printer", logging.INFO, __file__, 1, msg, None, None)


def test_request_id_filter_outside_request():
    rec = _record()
    assert RequestIdFilter().filter(rec) is True
    assert rec.request_id == "-"
    assert rec.path == "-"


def test_request_id_filter_inside_request(app):
    with app.test_request_context("/printq/list"):
        from flask import g

        g.request_id = "abc123"
        rec = _record()
        RequestIdFilter().filter(rec)
        assert rec.request_id == "abc123"
        assert rec.path == "/printq/list"


def test_json_formatter():
    rec = _record("queued qid=%s")
    rec.args = (7,)
    rec.request_id = "r1"
    out = json.loads(JsonFormatter().format(rec))
    assert out["msg"] == "queued qid=7"
    assert out["level"] == "INFO"
    assert out["request_id"] == "r1"
