"""
metadata
~~~~~~~~
Top-level package that bundles:

* core        – dataclasses + watched-list repository
* api_clients – OMDb client
* movie_watch_db – SQLite key/value storage
"""

# ── core objects ──────────────────────────────────────────────────────────
from .core.models import (                          # re-export
    SearchResult, MovieDetails, WatchedRecord, WatchedSummary,
    Idle, Loading, Success, Loaded, Failure, FetchState,
)
from .core.repo   import WatchedListStore
from .movie_watch_db import LocalStorage

# ── API client ────────────────────────────────────────────────────────────
from .api_clients.omdb_client import OMDBClient, OMDbError, TransportError, MovieNotFound

__all__ = [
    "SearchResult", "MovieDetails", "WatchedRecord", "WatchedSummary",
    "Idle", "Loading", "Success", "Loaded", "Failure", "FetchState",
    "WatchedListStore",
    "LocalStorage",
    "OMDBClient", "OMDbError", "TransportError", "MovieNotFound",
]
