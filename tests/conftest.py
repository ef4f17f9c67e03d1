"""
Pytest configuration and shared fixtures.
"""

import threading

import pytest
import requests

from filmlist.config import Settings
from filmlist.logger import StructuredLogger, reset_logger
from filmlist.schema import CandidateMatch


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """
    Stand-in for requests.Session.

    get_handler / post_handler receive the call kwargs and return a
    FakeResponse or raise. Calls are recorded for assertions.
    """

    def __init__(self, get_handler=None, post_handler=None):
        self.get_handler = get_handler
        self.post_handler = post_handler
        self.calls = []
        self._lock = threading.Lock()
        self.closed = False

    def _record(self, method, url, **kwargs):
        with self._lock:
            self.calls.append((method, url, kwargs))

    def get(self, url, params=None, timeout=None):
        self._record("GET", url, params=params, timeout=timeout)
        if self.get_handler is None:
            return FakeResponse(200, {})
        return self.get_handler(url=url, params=params, timeout=timeout)

    def post(self, url, json=None, timeout=None):
        self._record("POST", url, json=json, timeout=timeout)
        if self.post_handler is None:
            return FakeResponse(500, text="no handler")
        return self.post_handler(url=url, json=json, timeout=timeout)

    def close(self):
        self.closed = True

    def calls_for(self, method, suffix=""):
        return [c for c in self.calls if c[0] == method and c[1].endswith(suffix)]


@pytest.fixture(autouse=True)
def _reset_global_logger():
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def logger(tmp_path) -> StructuredLogger:
    return StructuredLogger(name="filmlist-test", log_dir=tmp_path, enable_console=False)


@pytest.fixture
def settings(tmp_path) -> Settings:
    input_dir = tmp_path / "input"
    output_dir = tmp_path / "output"
    input_dir.mkdir()
    return Settings(
        lookup_url="http://radarr.test/api/v3/movie/lookup",
        translate_url="http://translate.test",
        api_key="secret",
        input_dir=input_dir,
        output_dir=output_dir,
    )


@pytest.fixture
def matrix_payload():
    """Lookup API record for The Matrix."""
    return {
        "title": "The Matrix",
        "originalTitle": "The Matrix",
        "year": 1999,
        "secondaryYear": None,
        "images": [
            {"coverType": "fanart", "remoteUrl": "https://img.test/fanart.jpg"},
            {"coverType": "poster", "url": "/MediaCover/poster.jpg", "remoteUrl": "https://img.test/matrix.jpg"},
        ],
        "remotePoster": "https://img.test/remote.jpg",
        "imdbId": "tt0133093",
        "tmdbId": 603,
        "genres": ["Action", "Science Fiction"],
        "popularity": 9.0,
    }


def make_candidate(title="Movie", year=1999, popularity=None, imdb_id="tt0000001", tmdb_id=None, **kwargs):
    return CandidateMatch(
        title=title,
        year=year,
        popularity=popularity,
        imdb_id=imdb_id,
        tmdb_id=tmdb_id,
        **kwargs,
    )


def list_page(*titles) -> str:
    rows = "\n".join(
        f"<tr><td>{t}</td><td><span>rating</span></td></tr>" for t in titles
    )
    return f"""
    <html>
    <head><title>My list</title></head>
    <body>
        <table class="other"><tr><td>Not A Movie (2001)</td></tr></table>
        <table class="ml lists">
        {rows}
        </table>
    </body>
    </html>
    """
