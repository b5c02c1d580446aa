"""
gui
~~~
Qt controllers, request workers and the main window.

•  No direct storage or HTTP here – everything goes through `metadata`.
•  Re-export the high-level symbols so the app can simply:

    from movieWatch.gui import MainWindow, build_app_controller
"""

from movieWatch.gui.controller import (
    AppController,
    FetchController,
    DetailsController,
    SelectionStateMachine,
    ViewState,
    build_app_controller,
)
from movieWatch.gui.workers      import CancelToken, join_detached, start_worker
from movieWatch.gui.main_window  import MainWindow

__all__ = [
    "AppController", "FetchController", "DetailsController",
    "SelectionStateMachine", "ViewState", "build_app_controller",
    "CancelToken", "start_worker", "join_detached",
    "MainWindow",
]
