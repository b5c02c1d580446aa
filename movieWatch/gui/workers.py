from __future__ import annotations
import itertools
import threading
from typing import Callable

import shiboken6
from PySide6.QtCore import QObject, QThread, Signal, Slot

from movieWatch.metadata.api_clients.omdb_client import FETCH_FAILED_MESSAGE, OMDbError
from movieWatch.metadata.core.models import Failure, FetchState
from movieWatch.utils import log_debug

_request_ids = itertools.count(1)


class CancelToken:
    """
    Cancellation flag for one request. The controller keeps the current
    token; cancelling it is synchronous and can never be undone.
    """
    __slots__ = ("request_id", "label", "_cancelled")

    def __init__(self, label: str = ""):
        self.request_id = next(_request_ids)
        self.label = label
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def __repr__(self) -> str:
        flag = " cancelled" if self.cancelled else ""
        return f"<CancelToken #{self.request_id} {self.label!r}{flag}>"


# ───────────────────────── Worker skeleton ────────────────────────────────
class _RequestWorker(QObject):
    resolved = Signal(object, object)   # (token, FetchState) – never for cancelled tokens
    finished = Signal(object)           # token – always, for cleanup

    def __init__(self, job: Callable[[], FetchState], token: CancelToken):
        super().__init__()
        self.job = job
        self.token = token

    @Slot()
    def run(self):
        try:
            state = self._run()
            if self.token.cancelled:
                log_debug(f"dropped stale response for request #{self.token.request_id}")
            else:
                self.resolved.emit(self.token, state)
        finally:
            self.finished.emit(self.token)

    # actual job
    def _run(self) -> FetchState:
        try:
            return self.job()
        except OMDbError as e:
            return Failure(str(e))
        except Exception as e:
            log_debug(f"request-worker error ({self.token.label}): {e!r}")
            return Failure(FETCH_FAILED_MESSAGE)


# ───────────────────────── Thread launcher ────────────────────────────────
def start_worker(worker: _RequestWorker, parent: QObject | None = None) -> QThread:
    """Run *worker* on a fresh QThread; both clean themselves up when done."""
    thr = QThread(parent)
    worker.moveToThread(thr)

    worker.finished.connect(thr.quit)
    worker.finished.connect(worker.deleteLater)
    thr.finished.connect(thr.deleteLater)

    thr.started.connect(worker.run)
    thr.start()
    return thr


# ───────────────────────── Detached threads ───────────────────────────────
# threads still blocked in I/O after their owner shut down; kept referenced
# so Qt never destroys a running QThread
_detached: set[QThread] = set()


def detach_thread(thr: QThread) -> None:
    thr.setParent(None)
    _detached.add(thr)


def join_detached() -> None:
    """Block until every detached worker thread has stopped (call at exit)."""
    while _detached:
        thr = _detached.pop()
        if shiboken6.isValid(thr):
            thr.wait()
