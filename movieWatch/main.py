import sys

from PySide6.QtWidgets import QApplication

from movieWatch import settings
from movieWatch.settings        import Config
from movieWatch.utils           import apply_dark_palette
from movieWatch.gui.controller  import build_app_controller
from movieWatch.gui.main_window import MainWindow
from movieWatch.gui.workers     import join_detached


# ────────────────────────────────────────────────────────────────────────────
# Application entry
# ────────────────────────────────────────────────────────────────────────────
def main() -> None:
    app = QApplication(sys.argv)
    apply_dark_palette(app)

    config = Config.from_env()
    # log next to the database, wherever MOVIEWATCH_HOME points now
    settings.LOG_PATH = config.log_path

    controller = build_app_controller(config)
    window = MainWindow(controller)
    window.show()

    # -------- run the event-loop -------------------------------------
    code = app.exec()
    join_detached()
    sys.exit(code)

# Python entry-point guard
if __name__ == "__main__":
    main()
