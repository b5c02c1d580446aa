# Movie dataclasses, fetch-state variants (+ any simple DTOs)
from __future__ import annotations
from dataclasses import dataclass, field
import re
from typing import Any, Optional, Union

from movieWatch.settings import MAX_USER_RATING
from movieWatch.utils import average

# ---------- Helpers shared by the OMDb converters ----------
_MINUTES_RE = re.compile(r"(\d+)\s*min", re.I)

def _na(raw: Any) -> Optional[str]:
    """OMDb uses the literal "N/A" for missing fields."""
    if raw in (None, "", "N/A"):                 return None
    return str(raw)

def _minutes(raw: str | int | None) -> Optional[int]:
    if raw is None:                              return None
    if isinstance(raw, int):                     return raw
    m = _MINUTES_RE.search(raw)
    return int(m.group(1)) if m else None

def _score(raw: str | float | None) -> Optional[float]:
    try:                                         return float(raw)
    except (TypeError, ValueError):              return None


@dataclass(frozen=True, slots=True)
class SearchResult:
    imdb_id: str
    title: str
    year: str = ""
    poster: str | None = None

    @classmethod
    def from_omdb(cls, d: dict) -> SearchResult:
        return cls(
            imdb_id=d["imdbID"],
            title=d.get("Title") or "",
            year=d.get("Year") or "",
            poster=_na(d.get("Poster")),
        )


@dataclass(frozen=True, slots=True)
class MovieDetails:
    imdb_id: str
    title: str
    year: str = ""
    poster: str | None = None
    runtime: int | None = None
    imdb_rating: float | None = None
    plot: str | None = None
    released: str | None = None
    actors: str | None = None
    director: str | None = None
    genre: str | None = None

    @classmethod
    def from_omdb(cls, d: dict) -> MovieDetails:
        return cls(
            imdb_id=d["imdbID"],
            title=d.get("Title") or "",
            year=d.get("Year") or "",
            poster=_na(d.get("Poster")),
            runtime=_minutes(_na(d.get("Runtime"))),
            imdb_rating=_score(d.get("imdbRating")),
            plot=_na(d.get("Plot")),
            released=_na(d.get("Released")),
            actors=_na(d.get("Actors")),
            director=_na(d.get("Director")),
            genre=_na(d.get("Genre")),
        )


@dataclass(frozen=True, slots=True)
class WatchedRecord:
    """One movie the user has watched and rated; immutable once added."""
    imdb_id: str
    title: str
    user_rating: float
    year: str | None = ""
    poster: str | None = None
    runtime: int | None = None
    imdb_rating: float | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.imdb_id, str) or not self.imdb_id.strip():
            raise ValueError("WatchedRecord needs a non-empty imdb_id")
        if self.year is not None and not isinstance(self.year, str):
            raise ValueError("year must be a string or None")
        if not 0 <= self.user_rating <= MAX_USER_RATING:
            raise ValueError(f"user_rating must be within 0-{MAX_USER_RATING}")
        if self.imdb_rating is not None and not 0 <= self.imdb_rating <= 10:
            raise ValueError("imdb_rating must be within 0-10")
        if self.runtime is not None and self.runtime < 0:
            raise ValueError("runtime cannot be negative")

    @classmethod
    def from_details(cls, details: MovieDetails, user_rating: float) -> WatchedRecord:
        return cls(
            imdb_id=details.imdb_id,
            title=details.title,
            user_rating=user_rating,
            year=details.year,
            poster=details.poster,
            runtime=details.runtime,
            imdb_rating=details.imdb_rating,
        )

    # ── persisted JSON shape ────────────────────────────────────────────
    def to_json(self) -> dict:
        return {
            "imdbID":     self.imdb_id,
            "title":      self.title,
            "year":       self.year,
            "poster":     self.poster,
            "runtime":    self.runtime,
            "imdbRating": self.imdb_rating,
            "userRating": self.user_rating,
        }

    @classmethod
    def from_json(cls, d: dict) -> WatchedRecord:
        """Raises KeyError / TypeError / ValueError / OverflowError on malformed rows."""
        return cls(
            imdb_id=d["imdbID"],
            title=d["title"],
            user_rating=float(d["userRating"]),
            year=d.get("year", ""),
            poster=d.get("poster"),
            runtime=None if d.get("runtime") is None else int(d["runtime"]),
            imdb_rating=None if d.get("imdbRating") is None else float(d["imdbRating"]),
        )


@dataclass(frozen=True, slots=True)
class WatchedSummary:
    count: int = 0
    avg_imdb_rating: float = 0.0
    avg_user_rating: float = 0.0
    avg_runtime: float = 0.0

    @classmethod
    def of(cls, records) -> WatchedSummary:
        records = list(records)
        return cls(
            count=len(records),
            avg_imdb_rating=average(r.imdb_rating for r in records),
            avg_user_rating=average(r.user_rating for r in records),
            avg_runtime=average(r.runtime for r in records),
        )


# ---------- Fetch states (exactly one holds at a time) ----------
@dataclass(frozen=True, slots=True)
class Idle:
    pass

@dataclass(frozen=True, slots=True)
class Loading:
    pass

@dataclass(frozen=True, slots=True)
class Success:
    results: tuple[SearchResult, ...] = field(default_factory=tuple)

@dataclass(frozen=True, slots=True)
class Loaded:
    details: MovieDetails

@dataclass(frozen=True, slots=True)
class Failure:
    message: str

FetchState = Union[Idle, Loading, Success, Loaded, Failure]
