from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Optional

from PySide6.QtCore import QDeadlineTimer, QObject, QThread, Signal, Slot

from movieWatch.settings import Config
from movieWatch.utils import log_debug
from movieWatch.metadata.api_clients.omdb_client import OMDBClient
from movieWatch.metadata.core.models import (
    Failure, FetchState, Idle, Loaded, Loading, SearchResult, Success,
    WatchedRecord, WatchedSummary,
)
from movieWatch.metadata.core.repo import WatchedListStore
from movieWatch.metadata.movie_watch_db import LocalStorage
from movieWatch.gui.workers import CancelToken, _RequestWorker, detach_thread, start_worker

# a launcher takes ownership of a worker and eventually calls worker.run()
Launcher = Callable[[_RequestWorker], None]


# ───────────────────────── Request controllers ────────────────────────────
class _RequestController(QObject):
    """
    At most one live request; issuing a new one cancels the previous
    token before the worker for the new one exists.
    """
    stateChanged = Signal(object)

    def __init__(self, client: OMDBClient, launcher: Launcher | None = None, parent=None):
        super().__init__(parent)
        self._client = client
        self._launcher = launcher
        self._state: FetchState = Idle()
        self._token: CancelToken | None = None
        self._workers: dict[int, _RequestWorker] = {}   # keep Python refs alive

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._token is not None

    def _set_state(self, state: FetchState) -> None:
        self._state = state
        self.stateChanged.emit(state)

    def cancel(self) -> None:
        """Invalidate the in-flight request, if any. State is left alone."""
        if self._token is not None:
            self._token.cancel()
            log_debug(f"cancelled request #{self._token.request_id}")
            self._token = None

    def shutdown(self) -> None:
        """Cancel, then wait for worker threads against one shared deadline.

        Threads still blocked in I/O after the deadline are detached from
        this controller; `join_detached()` reaps them at exit.
        """
        self.cancel()
        deadline = QDeadlineTimer(int((self._client.timeout + 1) * 1000))
        for thr in self.findChildren(QThread):
            thr.quit()
            if not thr.wait(deadline):
                log_debug("worker thread outlived shutdown; detaching")
                detach_thread(thr)

    def _issue(self, label: str, job: Callable[[], FetchState]) -> None:
        self.cancel()
        token = self._token = CancelToken(label)
        self._set_state(Loading())

        worker = _RequestWorker(job, token)
        worker.resolved.connect(self._on_resolved)
        worker.finished.connect(self._reap)
        self._workers[token.request_id] = worker
        log_debug(f"request #{token.request_id} issued: {label}")

        if self._launcher is not None:
            self._launcher(worker)
        else:
            start_worker(worker, parent=self)

    @Slot(object, object)
    def _on_resolved(self, token: CancelToken, state: FetchState) -> None:
        if token is not self._token or token.cancelled:
            log_debug(f"ignored late result for request #{token.request_id}")
            return
        self._token = None
        self._set_state(state)

    @Slot(object)
    def _reap(self, token: CancelToken) -> None:
        self._workers.pop(token.request_id, None)


class FetchController(_RequestController):
    """Movie search by free text; results land in ``Success``."""

    def search(self, query: str) -> None:
        if not query:
            self.cancel()
            self._set_state(Idle())
            return
        self._issue(
            f"search {query!r}",
            lambda: Success(tuple(self._client.search(query))),
        )


class DetailsController(_RequestController):
    """Full OMDb record for the selected movie; lands in ``Loaded``."""

    def load(self, imdb_id: str) -> None:
        self._issue(
            f"details {imdb_id}",
            lambda: Loaded(self._client.details(imdb_id)),
        )

    def reset(self) -> None:
        self.cancel()
        if not isinstance(self._state, Idle):
            self._set_state(Idle())


# ───────────────────────── Selection ──────────────────────────────────────
class SelectionStateMachine(QObject):
    """Closed (``selected_id is None``) or Open(id). Emits only on change."""
    changed = Signal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._selected_id: str | None = None

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def is_open(self) -> bool:
        return self._selected_id is not None

    def select(self, imdb_id: str) -> None:
        """Open *imdb_id*; clicking the open movie again closes it."""
        self._move(None if imdb_id == self._selected_id else imdb_id)

    def close(self) -> None:
        self._move(None)

    def _move(self, selected_id: str | None) -> None:
        if selected_id == self._selected_id:
            return
        self._selected_id = selected_id
        self.changed.emit(selected_id)


# ───────────────────────── App composition ────────────────────────────────
@dataclass(frozen=True)
class ViewState:
    """Everything the window needs for one repaint."""
    query: str = ""
    show_loader: bool = False
    show_results: bool = False
    show_error: bool = False
    error: str = ""
    results: tuple[SearchResult, ...] = ()
    selected_id: str | None = None
    details: FetchState = field(default_factory=Idle)
    watched: tuple[WatchedRecord, ...] = ()
    summary: WatchedSummary = field(default_factory=WatchedSummary)

    @property
    def result_count(self) -> int:
        return len(self.results)


class AppController(QObject):
    viewChanged = Signal(object)

    def __init__(
        self,
        fetch: FetchController,
        selection: SelectionStateMachine,
        store: WatchedListStore,
        details: DetailsController | None = None,
        parent=None,
    ):
        super().__init__(parent)
        self.fetch = fetch
        self.selection = selection
        self.store = store
        self.details = details
        self._query = ""

        fetch.stateChanged.connect(self._emit_view)
        selection.changed.connect(self._on_selection_changed)
        if details is not None:
            details.stateChanged.connect(self._emit_view)

    # ── query ────────────────────────────────────────────────────────────
    @property
    def query(self) -> str:
        return self._query

    def set_query(self, query: str) -> None:
        if query == self._query:
            return
        self._query = query
        if query:
            self.selection.close()      # an open detail view never outlives a search
        self.fetch.search(query)

    def clear_query(self) -> None:
        self.set_query("")

    # ── selection ────────────────────────────────────────────────────────
    def select_movie(self, imdb_id: str) -> None:
        self.selection.select(imdb_id)

    def close_movie(self) -> None:
        self.selection.close()

    def selected_movie(self) -> SearchResult | WatchedRecord | None:
        """Resolve the selected id against the results, then the watched list."""
        sid = self.selection.selected_id
        if sid is None:
            return None
        for movie in self.view().results:
            if movie.imdb_id == sid:
                return movie
        return self.store.get(sid)

    @Slot(object)
    def _on_selection_changed(self, selected_id: str | None) -> None:
        if self.details is not None:
            if selected_id is None:
                self.details.reset()
            else:
                self.details.load(selected_id)
        self._emit_view()

    # ── watched list ─────────────────────────────────────────────────────
    def add_watched(self, record: WatchedRecord) -> bool:
        added = self.store.add(record)
        self.selection.close()
        self._emit_view()
        return added

    def add_watched_from_details(self, user_rating: float) -> bool:
        """Rate the movie in the open detail view and add it."""
        state = self.details.state if self.details is not None else Idle()
        if not isinstance(state, Loaded):
            raise ValueError("No movie details loaded.")
        return self.add_watched(WatchedRecord.from_details(state.details, user_rating))

    def delete_watched(self, imdb_id: str) -> None:
        self.store.remove(imdb_id)
        self._emit_view()

    def watched_user_rating(self, imdb_id: str) -> Optional[float]:
        rec = self.store.get(imdb_id)
        return rec.user_rating if rec else None

    # ── derived view ─────────────────────────────────────────────────────
    def view(self) -> ViewState:
        state = self.fetch.state
        active = bool(self._query)
        return ViewState(
            query=self._query,
            show_loader=active and isinstance(state, Loading),
            show_results=active and isinstance(state, Success),
            show_error=active and isinstance(state, Failure),
            error=state.message if isinstance(state, Failure) else "",
            results=state.results if isinstance(state, Success) else (),
            selected_id=self.selection.selected_id,
            details=self.details.state if self.details is not None else Idle(),
            watched=self.store.records,
            summary=self.store.summary(),
        )

    def _emit_view(self, *_args) -> None:
        self.viewChanged.emit(self.view())

    def shutdown(self) -> None:
        self.fetch.shutdown()
        if self.details is not None:
            self.details.shutdown()


def build_app_controller(
    config: Config,
    *,
    session=None,
    launcher: Launcher | None = None,
    storage: LocalStorage | None = None,
) -> AppController:
    """Wire the real collaborators for *config*."""
    if not config.api_key:
        log_debug(
            "OMDB_API_KEY is missing – set it in secret.env or the environment; "
            "every search will fail until it is provided."
        )
    client = OMDBClient(config.api_key, config.base_url, config.timeout, session=session)
    store = WatchedListStore(storage or LocalStorage(config.database_path), key=config.storage_key)
    store.load_initial()
    return AppController(
        FetchController(client, launcher),
        SelectionStateMachine(),
        store,
        DetailsController(client, launcher),
    )
