import pytest

from braille_printer import create_app
from braille_printer.core import db as dbh
from braille_printer.core.auth import TokenAuth
from braille_printer.core.config import load_settings
from braille_printer.core.db import StoreError
from braille_printer.printing.printq import PrintQueue

from conftest import ALLOWED_REFERER, all_records, fake_encode


@pytest.mark.parametrize(
    "text,expected",
    [
        ("hello", "label"),
        ("", "label"),
        ("line1\nline2", "paper"),
        ("trailing newline\n", "paper"),
        ("\n", "paper"),
        ("tab\tseparated", "label"),
    ],
)
def test_category_follows_line_breaks(app, client, fake_encoders, text, expected):
    r = client.post("/printq/add", data={"input": text, "lang": "en"}, headers=ALLOWED_REFERER)
    assert r.status_code == 200, r.get_data(as_text=True)
    assert r.get_data() == b""

    records = all_records(app)
    assert len(records) == 1
    assert records[0].category == expected
    assert records[0].status == 0
    assert records[0].owner_key == "examplekey"


@pytest.mark.parametrize("lang", ["ko", "en"])
@pytest.mark.parametrize("text", ["hello", "안녕\n하세요", "A-1 b"])
def test_stored_encoding_matches_encoder(app, client, fake_encoders, lang, text):
    r = client.post("/printq/add", data={"input": text, "lang": lang}, headers=ALLOWED_REFERER)
    assert r.status_code == 200

    rec = all_records(app)[0]
    assert rec.original_text == text
    assert rec.encoded_text == fake_encode(lang)(text)[0]
    assert rec.rendered_image.startswith(b"<?xml")


def test_lang_defaults_to_korean(app, client, fake_encoders):
    client.post("/printq/add", data={"input": "abc"}, headers=ALLOWED_REFERER)
    client.post("/printq/add", data={"input": "abc", "lang": ""}, headers=ALLOWED_REFERER)
    client.post("/printq/add", data={"input": "abc", "lang": "auto"}, headers=ALLOWED_REFERER)

    expected = fake_encode("ko")("abc")[0]
    assert [r.encoded_text for r in all_records(app)] == [expected] * 3


def test_query_string_fields_are_accepted(app, client, fake_encoders):
    r = client.post("/printq/add?input=hi&lang=en", headers=ALLOWED_REFERER)
    assert r.status_code == 200
    assert all_records(app)[0].encoded_text == fake_encode("en")("hi")[0]


@pytest.mark.parametrize("method", ["get", "put", "delete", "patch", "options"])
def test_wrong_method_is_rejected_without_record(app, client, method):
    r = getattr(client, method)("/printq/add?input=hello", headers=ALLOWED_REFERER)
    assert r.status_code == 405
    assert "Method Not Allowed" in r.get_data(as_text=True)
    assert all_records(app) == []


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Referer": "http://evil.example.com/"},
        {"Referer": "https://localhost/"},
        {"Origin": "http://attacker.test"},
    ],
)
def test_origin_outside_allow_list_is_unauthorized(app, client, headers):
    r = client.post("/printq/add", data={"input": "hello"}, headers=headers)
    assert r.status_code == 401
    assert r.get_data(as_text=True).strip() == "Unauthorized"
    assert all_records(app) == []


def test_origin_header_is_accepted_when_referer_missing(app, client, fake_encoders):
    r = client.post("/printq/add", data={"input": "hi"}, headers={"Origin": "http://braille-printer.appspot.com"})
    assert r.status_code == 200
    assert len(all_records(app)) == 1


def test_unknown_lang_stores_empty_encoding(app, client):
    r = client.post("/printq/add", data={"input": "bonjour", "lang": "fr"}, headers=ALLOWED_REFERER)
    assert r.status_code == 200

    rec = all_records(app)[0]
    assert rec.original_text == "bonjour"
    assert rec.encoded_text == ""
    assert rec.category == "label"


def test_unknown_lang_rejected_in_strict_mode(tmp_path, monkeypatch):
    monkeypatch.setenv("BRAILLEPRINTER_CONFIG_PATH", str(tmp_path / "missing.json"))
    app = create_app({"db_path": str(tmp_path / "strict.db"), "strict_lang": True, "TESTING": True})
    client = app.test_client()

    r = client.post("/printq/add", data={"input": "bonjour", "lang": "fr"}, headers=ALLOWED_REFERER)
    assert r.status_code == 400
    assert "fr" in r.get_data(as_text=True)
    assert all_records(app) == []


def test_bearer_token_sets_owner_key(tmp_path, monkeypatch, fake_encoders):
    monkeypatch.setenv("BRAILLEPRINTER_CONFIG_PATH", str(tmp_path / "missing.json"))
    app = create_app({"db_path": str(tmp_path / "tok.db"), "jwt_secret": "s3cret", "TESTING": True})
    client = app.test_client()
    token = TokenAuth("s3cret").generate_token("front-desk")

    r = client.post("/printq/add", data={"input": "hi"}, headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert all_records(app)[0].owner_key == "front-desk"

    r = client.get("/printq/list?key=front-desk")
    assert [e["qid"] for e in r.get_json()] == [all_records(app)[0].qid]


def test_bad_bearer_token_is_unauthorized_even_from_allowed_origin(tmp_path, monkeypatch):
    monkeypatch.setenv("BRAILLEPRINTER_CONFIG_PATH", str(tmp_path / "missing.json"))
    app = create_app({"db_path": str(tmp_path / "tok.db"), "jwt_secret": "s3cret", "TESTING": True})
    client = app.test_client()
    token = TokenAuth("other-secret").generate_token("mallory")

    headers = dict(ALLOWED_REFERER, Authorization=f"Bearer {token}")
    r = client.post("/printq/add", data={"input": "hi"}, headers=headers)
    assert r.status_code == 401
    assert all_records(app) == []


def test_store_failure_surfaces_as_internal_error(app, client, fake_encoders, monkeypatch):
    def _boom(record, db=None):
        raise StoreError("disk I/O error")

    monkeypatch.setattr(dbh, "put", _boom)

    r = client.post("/printq/add", data={"input": "hi"}, headers=ALLOWED_REFERER)
    assert r.status_code == 500
    assert "disk I/O error" in r.get_data(as_text=True)


def _capped_app(tmp_path, monkeypatch, cap):
    monkeypatch.setenv("BRAILLEPRINTER_CONFIG_PATH", str(tmp_path / "missing.json"))
    settings = load_settings({"db_path": str(tmp_path / "cap.db"), "max_content_length": cap})
    queue = PrintQueue(settings, encode=lambda text, lang: ("", 0), render=lambda encoded, length, size: b"<svg/>")
    return create_app({"TESTING": True}, queue=queue)


def test_body_over_content_cap_is_rejected(tmp_path, monkeypatch):
    app = _capped_app(tmp_path, monkeypatch, 64)
    r = app.test_client().post("/printq/add", data={"input": "x" * 200}, headers=ALLOWED_REFERER)
    assert r.status_code == 413
    assert all_records(app) == []


def test_zero_content_cap_accepts_large_input(tmp_path, monkeypatch):
    app = _capped_app(tmp_path, monkeypatch, 0)
    text = "x" * (2 * 1024 * 1024)
    r = app.test_client().post("/printq/add", data={"input": text}, headers=ALLOWED_REFERER)
    assert r.status_code == 200
    assert all_records(app)[0].original_text == text
