from .models import WatchedRecord, SearchResult, MovieDetails
from .repo   import WatchedListStore

__all__ = ["WatchedRecord", "SearchResult", "MovieDetails", "WatchedListStore"]
