import pytest

from braille_printer import create_app
from braille_printer.core import db as dbh
from braille_printer.core.db import StoreError

from conftest import store_record


def _ts(i: int) -> str:
    return f"2024-01-01T00:00:{i:02d}.000000+00:00"


def test_empty_listing_is_json_array(client):
    r = client.get("/printq/list")
    assert r.status_code == 200
    assert r.headers["Content-Type"] == "application/json; charset=utf-8"
    assert r.get_data(as_text=True) == "[]"


def test_defaults_to_labels_for_placeholder_key(app, client):
    label = store_record(app, category="label", created_at=_ts(1))
    store_record(app, category="paper", created_at=_ts(2))
    store_record(app, category="label", owner_key="someone-else", created_at=_ts(3))

    r = client.get("/printq/list")
    assert r.get_json() == [{"qid": label, "type": "label"}]


def test_type_filters_and_all_union_in_creation_order(app, client):
    # inserted out of creation order on purpose
    p2 = store_record(app, category="paper", created_at=_ts(4))
    l1 = store_record(app, category="label", created_at=_ts(1))
    p1 = store_record(app, category="paper", created_at=_ts(2))
    l2 = store_record(app, category="label", created_at=_ts(3))

    r = client.get("/printq/list?type=label")
    assert [e["qid"] for e in r.get_json()] == [l1, l2]

    r = client.get("/printq/list?type=paper")
    assert [e["qid"] for e in r.get_json()] == [p1, p2]
    assert {e["type"] for e in r.get_json()} == {"paper"}

    r = client.get("/printq/list?type=all")
    assert r.get_json() == [
        {"qid": l1, "type": "label"},
        {"qid": p1, "type": "paper"},
        {"qid": l2, "type": "label"},
        {"qid": p2, "type": "paper"},
    ]


def test_key_partitions_records(app, client):
    mine = store_record(app, owner_key="alpha", created_at=_ts(1))
    store_record(app, owner_key="beta", created_at=_ts(2))

    r = client.get("/printq/list?key=alpha&type=all")
    assert [e["qid"] for e in r.get_json()] == [mine]

    r = client.get("/printq/list?key=gamma&type=all")
    assert r.get_json() == []


def test_listing_is_capped_at_100(app, client):
    with app.app_context():
        for i in range(105):
            dbh.put(
                dbh.QueueRecord(
                    category="label" if i % 2 else "paper",
                    owner_key="examplekey",
                    original_text=str(i),
                    encoded_text="",
                    rendered_image=b"",
                    created_at=f"2024-01-01T00:{i // 60:02d}:{i % 60:02d}.000000+00:00",
                )
            )

    r = client.get("/printq/list?type=all")
    body = r.get_json()
    assert len(body) == 100
    qids = [e["qid"] for e in body]
    assert qids == sorted(qids)
    assert qids[0] == 1


def test_cap_comes_from_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("BRAILLEPRINTER_CONFIG_PATH", str(tmp_path / "missing.json"))
    app = create_app({"db_path": str(tmp_path / "small.db"), "max_query": 2, "TESTING": True})
    for i in range(4):
        store_record(app, created_at=_ts(i))

    r = app.test_client().get("/printq/list")
    assert len(r.get_json()) == 2


def test_unknown_type_is_bad_request(client):
    r = client.get("/printq/list?type=poster")
    assert r.status_code == 400
    assert "type" in r.get_data(as_text=True)


def test_blank_parameters_use_defaults(app, client):
    qid = store_record(app, created_at=_ts(1))
    r = client.get("/printq/list?type=&key=")
    assert [e["qid"] for e in r.get_json()] == [qid]


@pytest.mark.parametrize("method", ["post", "put", "delete", "options"])
def test_wrong_method(client, method):
    r = getattr(client, method)("/printq/list")
    assert r.status_code == 405
    assert "Method Not Allowed" in r.get_data(as_text=True)


def test_iteration_failure_is_internal_error(app, client, monkeypatch):
    store_record(app, created_at=_ts(1))

    def _broken_run(query, db=None):
        yield from ()
        raise StoreError("query cursor failed")

    monkeypatch.setattr(dbh, "run", _broken_run)

    r = client.get("/printq/list")
    assert r.status_code == 500
    assert "query cursor failed" in r.get_data(as_text=True)
