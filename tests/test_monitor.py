import json
from datetime import datetime, timezone

import httpx
import pytest

from bookmarks import Bookmark, BookmarkMonitor, XApiClient
from config import MissingCredentialsError

FIXED_NOW = datetime(2026, 3, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)


@pytest.fixture
def projects_file(monitor_config):
    monitor_config.projects_file.write_text("## proj\nwidget gadget gizmo\n")
    return monitor_config.projects_file


def _monitor(config, client=None):
    return BookmarkMonitor(config, client, clock=lambda: FIXED_NOW)


def _seen(config):
    return json.loads(config.seen_file.read_text())


def _alerts(config):
    return json.loads(config.alerts_file.read_text())


def test_relevant_bookmark_becomes_alert(monitor_config, projects_file):
    monitor = _monitor(monitor_config)

    result = monitor.process([Bookmark(id="1", text="new widget and gadget launch")])

    assert result.fetched == 1
    assert result.new == 1
    assert result.alerts_added == 1
    assert _alerts(monitor_config) == [{
        "id": "1",
        "url": "https://x.com/i/web/status/1",
        "text": "new widget and gadget launch",
        "relevance_score": 2,
        "reason": "Matches proj: widget, gadget",
        "project": "proj",
        "timestamp": "2026-03-01T12:30:45.123Z",
    }]
    assert _seen(monitor_config) == ["1"]


def test_irrelevant_bookmarks_are_marked_seen_only(monitor_config, projects_file):
    monitor = _monitor(monitor_config)

    result = monitor.process([Bookmark(id="1", text="lunch photos"), Bookmark(id="2", text="weather")])

    assert result.new == 2
    assert result.alerts_added == 0
    assert _seen(monitor_config) == ["1", "2"]
    assert not monitor_config.alerts_file.exists()


def test_only_unseen_bookmarks_are_scored(monitor_config, projects_file):
    monitor_config.seen_file.parent.mkdir(parents=True)
    monitor_config.seen_file.write_text(json.dumps(["1", "old"]))
    monitor = _monitor(monitor_config)

    result = monitor.process([
        Bookmark(id="1", text="widget gadget gizmo"),
        Bookmark(id="2", text="widget news"),
        Bookmark(id="3", text="nothing here"),
    ])

    assert result.fetched == 3
    assert result.new == 2
    assert [a.id for a in result.alerts] == ["2"]
    assert _seen(monitor_config) == ["1", "old", "2", "3"]


def test_nothing_new_writes_nothing(monitor_config, projects_file):
    monitor_config.seen_file.parent.mkdir(parents=True)
    monitor_config.seen_file.write_text(json.dumps(["1"]))
    before = monitor_config.seen_file.stat().st_mtime_ns
    monitor = _monitor(monitor_config)

    result = monitor.process([Bookmark(id="1", text="widget")])

    assert result.new == 0
    assert result.alerts_added == 0
    assert monitor_config.seen_file.stat().st_mtime_ns == before
    assert not monitor_config.alerts_file.exists()


def test_malformed_seen_file_treats_everything_as_new(monitor_config, projects_file):
    monitor_config.seen_file.parent.mkdir(parents=True)
    monitor_config.seen_file.write_text("not json at all")
    monitor = _monitor(monitor_config)

    result = monitor.process([Bookmark(id="1", text="widget"), Bookmark(id="2", text="gadget")])

    assert result.new == 2
    assert _seen(monitor_config) == ["1", "2"]


def test_alert_threshold_is_configurable(monitor_config, projects_file):
    monitor_config.alert_threshold = 3
    monitor = _monitor(monitor_config)

    result = monitor.process([Bookmark(id="1", text="widget gadget"), Bookmark(id="2", text="widget gadget gizmo")])

    assert [(a.id, a.relevance_score) for a in result.alerts] == [("2", 3)]


def test_default_projects_when_document_missing(monitor_config):
    monitor = _monitor(monitor_config)

    result = monitor.process([Bookmark(id="1", text="Claude and Anthropic ship a new LLM")])

    assert result.alerts[0].project == "Anthropic"
    assert result.alerts[0].relevance_score == 3


def test_alerts_accumulate_across_runs(monitor_config, projects_file):
    monitor = _monitor(monitor_config)

    monitor.process([Bookmark(id="1", text="widget")])
    monitor.process([Bookmark(id="1", text="widget"), Bookmark(id="2", text="gadget")])

    assert [a.id for a in monitor.show()] == ["1", "2"]


def test_clear_keeps_seen_set(monitor_config, projects_file):
    monitor = _monitor(monitor_config)
    monitor.process([Bookmark(id="1", text="widget")])

    monitor.clear()

    assert monitor.show() == []
    assert _seen(monitor_config) == ["1"]


@pytest.mark.asyncio
async def test_check_without_client_requires_credentials(monitor_config):
    with pytest.raises(MissingCredentialsError):
        await _monitor(monitor_config).check()


@pytest.mark.asyncio
async def test_check_looks_up_user_when_not_configured(monitor_config, projects_file, mock_client):
    monitor_config.user_id = None
    monitor_config.username = "someone"
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        if request.url.path == "/2/users/by/username/someone":
            return httpx.Response(200, json={"data": {"id": "555"}})
        return httpx.Response(200, json={"data": [{"id": "9", "text": "widget gadget"}]})

    async with XApiClient("tok", monitor_config.api_base, client=mock_client(handler)) as api:
        result = await _monitor(monitor_config, api).check()

    assert paths == ["/2/users/by/username/someone", "/2/users/555/bookmarks"]
    assert result.user_id == "555"
    assert result.looked_up is True
    assert result.alerts_added == 1


@pytest.mark.asyncio
async def test_check_uses_configured_user_id(monitor_config, projects_file, mock_client):
    paths = []

    def handler(request):
        paths.append(request.url.path)
        return httpx.Response(200, json={"data": []})

    async with XApiClient("tok", monitor_config.api_base, client=mock_client(handler)) as api:
        result = await _monitor(monitor_config, api).check()

    assert paths == ["/2/users/12345/bookmarks"]
    assert result.looked_up is False
    assert result.new == 0
