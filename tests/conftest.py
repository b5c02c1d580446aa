import os
import json
import tempfile

# IMPORTANT:
# Point the data dir somewhere disposable BEFORE importing movieWatch.settings
os.environ.setdefault("MOVIEWATCH_HOME", tempfile.mkdtemp(prefix="moviewatch-test-"))

import pytest
import requests
from PySide6.QtCore import QCoreApplication

from movieWatch import settings
from movieWatch.metadata.api_clients.omdb_client import OMDBClient
from movieWatch.metadata.core.repo import WatchedListStore
from movieWatch.metadata.movie_watch_db import LocalStorage


def make_response(payload=None, status_code: int = 200, body: bytes | None = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = body if body is not None else json.dumps(payload).encode()
    resp.encoding = "utf-8"
    return resp


BATMAN = {
    "Response": "True",
    "Search": [{"imdbID": "tt1", "Title": "Batman", "Year": "1989", "Poster": "N/A"}],
    "totalResults": "1",
}

BATMAN_DETAILS = {
    "Response": "True",
    "imdbID": "tt1",
    "Title": "Batman",
    "Year": "1989",
    "Poster": "http://img.test/batman.jpg",
    "Runtime": "126 min",
    "imdbRating": "7.5",
    "Plot": "The Dark Knight of Gotham City begins his war on crime.",
    "Released": "23 Jun 1989",
    "Actors": "Michael Keaton, Jack Nicholson",
    "Director": "Tim Burton",
    "Genre": "Action, Adventure",
}

NOT_FOUND = {"Response": "False", "Error": "Movie not found!"}


class FakeSession:
    """Stands in for requests.Session; routes on the `s` / `i` query param."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def route(self, key, payload=None, status_code=200, body=None):
        self.routes[key] = make_response(payload, status_code, body)

    def fail(self, key, exc: Exception):
        self.routes[key] = exc

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        key = params.get("s") or params.get("i")
        hit = self.routes.get(key)
        if hit is None:
            return make_response({"Response": "False", "Error": "Movie not found!"})
        if isinstance(hit, Exception):
            raise hit
        return hit


class QueueLauncher:
    """Collects workers instead of starting threads; tests run them by hand."""

    def __init__(self):
        self.workers = []

    def __call__(self, worker):
        self.workers.append(worker)

    def run(self, index: int = -1):
        self.workers[index].run()

    def run_all(self):
        for w in list(self.workers):
            w.run()

    def labels(self):
        return [w.token.label for w in self.workers]


@pytest.fixture(scope="session", autouse=True)
def qapp():
    yield QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture(autouse=True)
def log_path(tmp_path, monkeypatch):
    path = tmp_path / "logs" / "movie_watch.log"
    monkeypatch.setattr(settings, "LOG_PATH", path)
    return path


@pytest.fixture
def session():
    s = FakeSession()
    s.route("batman", BATMAN)
    s.route("tt1", BATMAN_DETAILS)
    s.route("zzzznotfound", NOT_FOUND)
    return s


@pytest.fixture
def client(session):
    return OMDBClient("test-key", base_url="http://omdb.test/", timeout=1, session=session)


@pytest.fixture
def launcher():
    return QueueLauncher()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "movie_watch.sqlite"


@pytest.fixture
def storage(db_path):
    s = LocalStorage(db_path)
    yield s
    s.close()


@pytest.fixture
def store(storage):
    s = WatchedListStore(storage)
    s.load_initial()
    return s

