from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import math
import os

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

# Load environment variables (package secret first, then the working dir)
load_dotenv(BASE_DIR / "secret.env")
load_dotenv()

DEFAULT_TIMEOUT = 8.0


def _timeout_env(default: float = DEFAULT_TIMEOUT) -> float:
    """OMDB_TIMEOUT in seconds; anything unparsable or non-positive is ignored."""
    raw = os.getenv("OMDB_TIMEOUT")
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if math.isfinite(value) and value > 0 else default


def _data_dir() -> Path:
    return Path(os.getenv("MOVIEWATCH_HOME", Path.home() / ".movieWatch"))


OMDB_API_KEY    = os.getenv("OMDB_API_KEY")
OMDB_URL        = os.getenv("OMDB_URL", "http://www.omdbapi.com/")
REQUEST_TIMEOUT = _timeout_env()

# File / folder paths
DATA_DIR      = _data_dir()
DATABASE_PATH = DATA_DIR / "movie_watch.sqlite"
LOG_PATH      = DATA_DIR / "movie_watch.log"

# Storage key holding the JSON-encoded watched list
WATCHED_KEY = "watched"

# UI constants
ACCENT_COLOR = "#3b82f6"
MAX_USER_RATING = 10


@dataclass(frozen=True, slots=True)
class Config:
    """Everything the controllers need from the outside world."""
    api_key: str | None
    base_url: str = OMDB_URL
    timeout: float = REQUEST_TIMEOUT
    database_path: Path = DATABASE_PATH
    storage_key: str = WATCHED_KEY
    log_path: Path = LOG_PATH

    @classmethod
    def from_env(cls) -> "Config":
        """Re-read the environment; module constants are only defaults."""
        home = _data_dir()
        return cls(
            api_key=os.getenv("OMDB_API_KEY") or None,
            base_url=os.getenv("OMDB_URL", OMDB_URL),
            timeout=_timeout_env(),
            database_path=home / "movie_watch.sqlite",
            log_path=home / "movie_watch.log",
        )
