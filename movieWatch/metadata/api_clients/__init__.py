"""
metadata.api_clients
~~~~~~~~~~~~~~~~~~~~
Thin wrappers around external REST APIs.
"""

from .omdb_client import OMDBClient, OMDbError, TransportError, MovieNotFound

__all__ = ["OMDBClient", "OMDbError", "TransportError", "MovieNotFound"]
