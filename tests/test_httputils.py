import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

from keptnkit.httputils import Downloader, download_from_url, is_valid_url


class _SmileHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        body = b":-)"
        self.send_response(200)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def server_url():
    httpd = HTTPServer(("127.0.0.1", 0), _SmileHandler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{httpd.server_port}"
    httpd.shutdown()
    httpd.server_close()


def test_download_from_url(server_url):
    assert download_from_url(server_url) == b":-)"


def test_downloader_with_timeout(server_url):
    assert Downloader(timeout=5).download_from_url(server_url) == b":-)"


def test_download_invalid_url():
    with pytest.raises(ValueError, match="keptn.sh is not a valid URL"):
        download_from_url("keptn.sh")


@pytest.mark.parametrize(
    "url, expected",
    [
        ("keptn.sh", False),
        ("keptn..sh", False),
        ("", False),
        ("lakjglakbgjoejgfrlej", False),
        ("1", False),
        ("http://keptn.sh", True),
        ("http://www.keptn.sh", True),
        ("http://keptn.sh/a/b/c", True),
        ("http://keptn.sh/a/b?c=d&e=f", True),
        ("http://127.0.0.1/", True),
    ],
)
def test_is_valid_url(url, expected):
    assert is_valid_url(url) is expected