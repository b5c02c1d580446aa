"""
movieWatch
~~~~~~~~~~

Top-level package for the Movie Watch application.

Exports:
  - Config (API key, endpoint, storage location)
  - Utility functions: log_debug, apply_dark_palette
  - AppController and its collaborators, build_app_controller
  - MainWindow GUI
"""

# settings
from movieWatch.settings import Config

# utils
from movieWatch.utils import log_debug, apply_dark_palette

# core logic
from movieWatch.gui.controller import (
    AppController,
    FetchController,
    DetailsController,
    SelectionStateMachine,
    ViewState,
    build_app_controller,
)

# GUI entrypoint
from movieWatch.gui.main_window import MainWindow

__all__ = [
    # settings
    "Config",
    # utils
    "log_debug",
    "apply_dark_palette",
    # core logic
    "AppController",
    "FetchController",
    "DetailsController",
    "SelectionStateMachine",
    "ViewState",
    "build_app_controller",
    # GUI
    "MainWindow",
]
