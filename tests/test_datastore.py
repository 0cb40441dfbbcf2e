import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlsplit

import pytest

from keptnkit.datastore import DatastoreError, EventHandler

CONTEXT = "8929e5e5-3826-488f-9257-708bfa974909"
EVENT_TYPE = "sh.keptn.events.evaluation-done"


def _event(event_id, stage, time):
    return {
        "contenttype": "application/json",
        "data": {"project": "sockshop", "service": "carts", "stage": stage},
        "id": event_id,
        "source": "pitometer-service",
        "specversion": "0.2",
        "time": time,
        "type": EVENT_TYPE,
        "shkeptncontext": CONTEXT,
    }


EVENTS = [
    _event("aaa50752-ab33-493b-8b28-3548f7960f80", "production", "2019-10-21T14:12:48.000Z"),
    _event("573610d2-3643-4513-9a8e-df7c6614356f", "staging", "2019-10-21T14:10:05.000Z"),
    _event("a46be431-b45b-4f18-bf74-73fc7d2da062", "dev", "2019-10-21T14:04:25.000Z"),
]


@pytest.fixture
def server():
    state = {"status": 200, "body": b"", "requests": []}

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            state["requests"].append((self.command, self.path))
            self.send_response(state["status"])
            self.send_header("Content-Length", str(len(state["body"])))
            self.end_headers()
            self.wfile.write(state["body"])

        def log_message(self, *args):
            pass

    httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"https://127.0.0.1:{httpd.server_address[1]}", state
    finally:
        httpd.shutdown()
        httpd.server_close()


def test_get_event_status_ok(server):
    url, state = server
    state["body"] = json.dumps({"events": EVENTS, "pageSize": 10, "totalCount": 3}).encode()
    handler = EventHandler(url)
    event = handler.get_event(CONTEXT, EVENT_TYPE)
    assert event["time"] == "2019-10-21T14:12:48.000Z"
    method, path = state["requests"][0]
    assert method == "GET"
    parts = urlsplit(path)
    assert parts.path == "/event"
    query = parse_qs(parts.query)
    assert query["keptnContext"] == [CONTEXT]
    assert query["type"] == [EVENT_TYPE]
    assert query["pageSize"] == ["10"]


def test_latest_event_found_regardless_of_order(server):
    url, state = server
    state["body"] = json.dumps({"events": list(reversed(EVENTS))}).encode()
    event = EventHandler(url).get_event(CONTEXT, EVENT_TYPE)
    assert event["id"] == "aaa50752-ab33-493b-8b28-3548f7960f80"


def test_get_event_status_ok_no_event(server):
    url, state = server
    state["body"] = json.dumps({"events": [], "pageSize": 10, "totalCount": 0}).encode()
    with pytest.raises(DatastoreError) as info:
        EventHandler(url).get_event(CONTEXT, EVENT_TYPE)
    assert info.value.message == (
        "No Keptn sh.keptn.events.evaluation-done event found for context: "
        "8929e5e5-3826-488f-9257-708bfa974909"
    )
    assert info.value.code == 404


def test_empty_body_means_no_event(server):
    url, state = server
    with pytest.raises(DatastoreError) as info:
        EventHandler(url).get_event(CONTEXT, EVENT_TYPE)
    assert info.value.code == 404


def test_error_response_is_raised(server):
    url, state = server
    state["status"] = 500
    state["body"] = json.dumps({"code": 500, "message": "boom"}).encode()
    with pytest.raises(DatastoreError) as info:
        EventHandler(url).get_event(CONTEXT, EVENT_TYPE)
    assert info.value.message == "boom"
    assert info.value.code == 500


def test_invalid_json_is_raised(server):
    url, state = server
    state["body"] = b"not json"
    with pytest.raises(DatastoreError):
        EventHandler(url).get_event(CONTEXT, EVENT_TYPE)


def test_scheme_prefix_is_stripped():
    assert EventHandler("https://localhost").base_url == "localhost"
    assert EventHandler("http://localhost:8080").base_url == "localhost:8080"
    assert EventHandler("https://localhost").scheme == "http"