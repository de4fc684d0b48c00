import json

from bookmarks import Alert, AlertStore, SeenStore


def _alert(alert_id, score=2):
    return Alert(
        id=alert_id,
        url=f"https://x.com/i/web/status/{alert_id}",
        text=f"text {alert_id}",
        relevance_score=score,
        reason="Matches proj: widget",
        project="proj",
        timestamp="2026-01-01T00:00:00.000Z",
    )


def test_seen_store_round_trip_creates_directories(tmp_path):
    store = SeenStore(tmp_path / "nested" / "seen.json")

    store.save(["1", "2", "3"])

    assert store.load() == ["1", "2", "3"]
    assert json.loads(store.path.read_text()) == ["1", "2", "3"]


def test_seen_store_missing_file_is_empty(tmp_path):
    assert SeenStore(tmp_path / "seen.json").load() == []


def test_seen_store_malformed_file_is_empty(tmp_path):
    path = tmp_path / "seen.json"
    path.write_text("{not json")

    assert SeenStore(path).load() == []


def test_seen_store_non_list_is_empty(tmp_path):
    path = tmp_path / "seen.json"
    path.write_text('{"ids": ["1"]}')

    assert SeenStore(path).load() == []


def test_alert_store_appends_in_order(tmp_path):
    store = AlertStore(tmp_path / "alerts.json")

    store.append([_alert("1")])
    store.append([_alert("2"), _alert("3", score=3)])

    assert [a.id for a in store.load_alerts()] == ["1", "2", "3"]
    assert store.load()[2]["relevance_score"] == 3


def test_alert_store_clear_writes_empty_list(tmp_path):
    store = AlertStore(tmp_path / "alerts.json")
    store.append([_alert("1")])

    store.clear()

    assert json.loads(store.path.read_text()) == []
    assert store.load_alerts() == []


def test_invalid_alert_records_are_kept_on_disk(tmp_path):
    path = tmp_path / "alerts.json"
    path.write_text(json.dumps([{"id": "broken"}, _alert("1").model_dump()]))
    store = AlertStore(path)

    assert [a.id for a in store.load_alerts()] == ["1"]

    store.append([_alert("2")])

    assert [record["id"] for record in store.load()] == ["broken", "1", "2"]


def test_alert_store_malformed_file_is_empty(tmp_path):
    path = tmp_path / "alerts.json"
    path.write_text("[{]")

    assert AlertStore(path).load() == []
