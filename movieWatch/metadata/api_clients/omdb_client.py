# movieWatch/metadata/api_clients/omdb_client.py
from __future__ import annotations

import functools
from typing import List

import requests

from movieWatch.metadata.core.models import MovieDetails, SearchResult
from movieWatch.settings import OMDB_URL, REQUEST_TIMEOUT
from movieWatch.utils import log_debug

FETCH_FAILED_MESSAGE = "Something went wrong while fetching movies"
NOT_FOUND_MESSAGE    = "Movie not found"


class OMDbError(Exception):
    """Any OMDb problem that should be shown to the user as a failed fetch."""
    default_message = FETCH_FAILED_MESSAGE

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class TransportError(OMDbError):
    """Non-2xx status, network failure or a body that is not JSON."""


class MovieNotFound(OMDbError):
    """OMDb answered ``"Response": "False"``."""
    default_message = NOT_FOUND_MESSAGE


class OMDBClient:
    """
    Thin wrapper around omdbapi.com exposing *search* and *details*.
    Requests go through module-level `requests.get` unless a session is
    injected (tests swap in a fake); one details payload is cached per
    IMDb id.
    """

    # ────────────────────────────────────────────────────────────────
    # Construction
    # ────────────────────────────────────────────────────────────────
    def __init__(
        self,
        api_key: str | None,
        base_url: str = OMDB_URL,
        timeout: float = REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ):
        # a missing key is reported at startup; OMDb then answers 401
        self.api_key  = api_key or ""
        self.base_url = base_url
        self.timeout  = timeout
        # no Session shared between worker threads
        self._http    = session if session is not None else requests

    # ────────────────────────────────────────────────────────────────
    # Internal – one GET, errors mapped onto the OMDbError taxonomy
    # ────────────────────────────────────────────────────────────────
    def _get(self, **params: str) -> dict:
        try:
            resp = self._http.get(
                self.base_url,
                params={"apikey": self.api_key, **params},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log_debug(f"OMDb fetch error {params}: {exc}")
            raise TransportError() from exc

        if not resp.ok:
            log_debug(f"OMDb HTTP {resp.status_code} for {params}")
            raise TransportError()

        try:
            data = resp.json()
        except ValueError as exc:
            log_debug(f"OMDb returned non-JSON body for {params}")
            raise TransportError() from exc
        if not isinstance(data, dict):
            raise TransportError()

        if data.get("Response") == "False":
            log_debug(f"OMDb: {data.get('Error', 'no match')} {params}")
            raise MovieNotFound()
        return data

    # ────────────────────────────────────────────────────────────────
    # Public API
    # ────────────────────────────────────────────────────────────────
    def search(self, query: str) -> List[SearchResult]:
        """Summaries matching *query*, in the order OMDb returns them."""
        data = self._get(s=query)
        try:
            return [SearchResult.from_omdb(item) for item in data.get("Search") or []]
        except (KeyError, TypeError, AttributeError) as exc:
            log_debug(f"OMDb search payload malformed: {exc!r}")
            raise TransportError() from exc

    def details(self, imdb_id: str) -> MovieDetails:
        data = self._details_payload(imdb_id)
        try:
            return MovieDetails.from_omdb(data)
        except (KeyError, TypeError) as exc:
            log_debug(f"OMDb details payload malformed: {exc!r}")
            raise TransportError() from exc

    @functools.lru_cache(maxsize=512)
    def _details_payload(self, imdb_id: str) -> dict:
        # exceptions are not cached, so a failed lookup is retried next time
        return self._get(i=imdb_id, plot="short")
