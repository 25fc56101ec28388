"""Store clients for the hosted relational store and its in-memory stand-in."""

from .memory import InMemoryStore
from .rest import RestStoreClient, build_filter_params

__all__ = ["InMemoryStore", "RestStoreClient", "build_filter_params"]
