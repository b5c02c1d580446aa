# gui/main_window.py
from __future__ import annotations

from PySide6.QtCore    import Qt, Slot
from PySide6.QtGui     import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QMainWindow, QListWidget, QListWidgetItem, QStackedWidget, QSplitter,
    QMessageBox, QWidget, QVBoxLayout, QHBoxLayout, QLineEdit, QLabel,
    QPushButton, QSpinBox,
)

from movieWatch.settings         import MAX_USER_RATING
from movieWatch.utils            import format_runtime
from movieWatch.gui.controller   import AppController, ViewState
from movieWatch.metadata.core.models import Failure, Loaded, Loading

_LIST, _LOADER, _ERROR = range(3)
_WATCHED, _DETAILS = range(2)


class MainWindow(QMainWindow):
    """Search box + results on the left; details or watched list on the right."""

    def __init__(self, controller: AppController):
        super().__init__()
        self.controller = controller
        self.setWindowTitle("Movie Watch")
        self.resize(960, 600)
        self._shown_results: tuple = ()

        # ── top bar ─────────────────────────────────────────────────────
        self.search_input = QLineEdit(placeholderText="Search movies...")
        self.search_input.textChanged.connect(controller.set_query)
        self.count_label = QLabel()
        top = QHBoxLayout()
        top.addWidget(self.search_input, 1)
        top.addWidget(self.count_label)

        # ── left box: list | loader | error ─────────────────────────────
        self.results_list = QListWidget()
        self.results_list.itemClicked.connect(self._on_result_clicked)
        self.error_label = QLabel(alignment=Qt.AlignCenter)
        self.left = QStackedWidget()
        self.left.addWidget(self.results_list)
        self.left.addWidget(QLabel("Loading...", alignment=Qt.AlignCenter))
        self.left.addWidget(self.error_label)

        # ── right box: watched summary/list | details ───────────────────
        self.right = QStackedWidget()
        self.right.addWidget(self._build_watched_page())
        self.right.addWidget(self._build_details_page())

        splitter = QSplitter()
        splitter.addWidget(self.left)
        splitter.addWidget(self.right)
        splitter.setStretchFactor(1, 1)

        root = QWidget()
        lay = QVBoxLayout(root)
        lay.addLayout(top)
        lay.addWidget(splitter, 1)
        self.setCentralWidget(root)

        # ── keyboard ────────────────────────────────────────────────────
        QShortcut(QKeySequence(Qt.Key_Escape), self, activated=controller.close_movie)
        QShortcut(QKeySequence(Qt.Key_Return), self, activated=self._focus_search)

        controller.viewChanged.connect(self.render)
        self.render(controller.view())

    # ───────────────────────────────────────────────────────────────────
    def _build_watched_page(self) -> QWidget:
        page = QWidget()
        lay = QVBoxLayout(page)
        self.summary_label = QLabel()
        self.watched_list = QListWidget()
        delete_btn = QPushButton("Delete")
        delete_btn.clicked.connect(self._on_delete_clicked)
        lay.addWidget(QLabel("<h3>Movies you watched</h3>"))
        lay.addWidget(self.summary_label)
        lay.addWidget(self.watched_list, 1)
        lay.addWidget(delete_btn, 0, Qt.AlignRight)
        return page

    def _build_details_page(self) -> QWidget:
        page = QWidget()
        lay = QVBoxLayout(page)
        back_btn = QPushButton("← Back")
        back_btn.clicked.connect(self.controller.close_movie)
        self.details_label = QLabel(wordWrap=True)
        self.details_label.setTextFormat(Qt.RichText)
        self.rated_label = QLabel()
        self.rating_spin = QSpinBox(minimum=1, maximum=MAX_USER_RATING)
        self.add_btn = QPushButton("+ Add to list")
        self.add_btn.clicked.connect(self._on_add_clicked)

        rate_row = QHBoxLayout()
        rate_row.addWidget(self.rating_spin)
        rate_row.addWidget(self.add_btn)
        rate_row.addStretch()

        lay.addWidget(back_btn, 0, Qt.AlignLeft)
        lay.addWidget(self.details_label, 1)
        lay.addWidget(self.rated_label)
        lay.addLayout(rate_row)
        return page

    # ───────────────────────────────────────────────────────────────────
    @Slot(object)
    def render(self, view: ViewState) -> None:
        if self.search_input.text() != view.query:
            self.search_input.blockSignals(True)
            self.search_input.setText(view.query)
            self.search_input.blockSignals(False)
        self.count_label.setText(f"Found {view.result_count} results")

        if view.show_loader:
            self.left.setCurrentIndex(_LOADER)
        elif view.show_error:
            self.error_label.setText(f"⛔️ {view.error}")
            self.left.setCurrentIndex(_ERROR)
        else:
            self.left.setCurrentIndex(_LIST)
        if view.results != self._shown_results:
            self._shown_results = view.results
            self.results_list.clear()
            for m in view.results:
                item = QListWidgetItem(f"{m.title}  🗓 {m.year}")
                item.setData(Qt.UserRole, m.imdb_id)
                self.results_list.addItem(item)

        self._render_watched(view)
        if view.selected_id is None:
            self.right.setCurrentIndex(_WATCHED)
            self.setWindowTitle("Movie Watch")
        else:
            self._render_details(view)
            self.right.setCurrentIndex(_DETAILS)

    def _render_watched(self, view: ViewState) -> None:
        s = view.summary
        self.summary_label.setText(
            f"#️⃣ {s.count} movies   ⭐️ {s.avg_imdb_rating:.2f}   "
            f"🌟 {s.avg_user_rating:.2f}   ⏳ {s.avg_runtime:.2f} min"
        )
        self.watched_list.clear()
        for r in view.watched:
            item = QListWidgetItem(
                f"{r.title}   ⭐️ {r.imdb_rating or '—'}   🌟 {r.user_rating:g}   "
                f"⏳ {format_runtime(r.runtime)}"
            )
            item.setData(Qt.UserRole, r.imdb_id)
            self.watched_list.addItem(item)

    def _render_details(self, view: ViewState) -> None:
        state = view.details
        rated = self.controller.watched_user_rating(view.selected_id)
        loaded = isinstance(state, Loaded)

        if isinstance(state, Loading):
            self.details_label.setText("Loading...")
        elif isinstance(state, Failure):
            self.details_label.setText(f"⛔️ {state.message}")
        elif loaded:
            d = state.details
            self.setWindowTitle(f"Movie | {d.title}")
            self.details_label.setText(
                f"<h2>{d.title}</h2>"
                f"<p>{d.released or ''} · {format_runtime(d.runtime)}</p>"
                f"<p>{d.genre or ''}</p>"
                f"<p>⭐️ {d.imdb_rating or '—'} IMDb rating</p>"
                f"<p><em>{d.plot or ''}</em></p>"
                f"<p>Starring {d.actors or '—'}</p>"
                f"<p>Directed by {d.director or '—'}</p>"
            )

        self.rated_label.setVisible(rated is not None)
        self.rated_label.setText(f"You rated this movie {rated:g} 🌟" if rated is not None else "")
        self.rating_spin.setVisible(loaded and rated is None)
        self.add_btn.setVisible(loaded and rated is None)

    # ───────────────────────────────────────────────────────────────────
    @Slot(QListWidgetItem)
    def _on_result_clicked(self, item: QListWidgetItem) -> None:
        self.controller.select_movie(item.data(Qt.UserRole))

    @Slot()
    def _on_add_clicked(self) -> None:
        try:
            self.controller.add_watched_from_details(self.rating_spin.value())
        except ValueError as e:
            QMessageBox.warning(self, "Error", str(e))

    @Slot()
    def _on_delete_clicked(self) -> None:
        item = self.watched_list.currentItem()
        if item is not None:
            self.controller.delete_watched(item.data(Qt.UserRole))

    @Slot()
    def _focus_search(self) -> None:
        """Enter anywhere outside the search box focuses and clears it."""
        if self.search_input.hasFocus():
            return
        self.search_input.setFocus()
        self.controller.clear_query()

    def closeEvent(self, event) -> None:
        self.controller.shutdown()
        super().closeEvent(event)
