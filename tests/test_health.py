from braille_printer.core import db as dbh


def test_healthz_ok(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    body = r.get_json()
    assert body["status"] == "ok"
    assert body["store_ok"] is True
    assert body["languages"] == ["en", "ko"]


def test_healthz_degraded_when_store_fails(client, monkeypatch):
    monkeypatch.setattr(dbh, "ping", lambda db=None: False)
    body = client.get("/healthz").get_json()
    assert body["status"] == "degraded"
    assert body["reason"] == "store_unavailable"
