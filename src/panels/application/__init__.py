"""Application layer - services, importer and settings."""

from .factory import ServiceFactory, get_factory, reset_factory, set_factory
from .results import OperationResult
from .session import SessionState

__all__ = [
    "OperationResult",
    "ServiceFactory",
    "SessionState",
    "get_factory",
    "reset_factory",
    "set_factory",
]
