"""
Label stores for acts_as_label.

This module provides the label store contract and its implementations:
an in-memory store and an ArangoDB store.
"""

from ..config import LabelConfig
from ..errors import ConfigurationError
from .arangodb import ArangoLabelStore
from .base import LabelStore
from .memory import InMemoryLabelStore


def create_store() -> LabelStore:
    """
    Create the label store selected by ``store.backend``.

    Raises:
        ConfigurationError: If the backend name is unknown
    """
    backend = LabelConfig.get_store_backend()
    if backend == "memory":
        return InMemoryLabelStore()
    if backend == "arangodb":
        return ArangoLabelStore()
    raise ConfigurationError(f"Unknown label store backend: {backend!r}")


__all__ = ["ArangoLabelStore", "InMemoryLabelStore", "LabelStore", "create_store"]
