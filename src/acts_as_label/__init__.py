"""
acts_as_label - system labels and friendly labels for stored models.

This package gives models a normalized, write-once system label (such as
``MONTHLY``) and a human-readable label, and resolves entities by system
label through a cached registry.
"""

from .codes import normalize
from .config import LabelConfig
from .db import ArangoLabelStore, InMemoryLabelStore, LabelStore, create_store
from .errors import ActsAsLabelError, ConfigurationError, NotFoundError, ValidationError
from .label_service import LabelService
from .models import Label, LabeledModel, define_family
from .registry import LabelFamilyAccessor, LabelOptions, LabelRegistry

__version__ = "0.1.0"

__all__ = [
    "ActsAsLabelError",
    "ArangoLabelStore",
    "ConfigurationError",
    "InMemoryLabelStore",
    "Label",
    "LabelConfig",
    "LabelFamilyAccessor",
    "LabelOptions",
    "LabelRegistry",
    "LabelService",
    "LabelStore",
    "LabeledModel",
    "NotFoundError",
    "ValidationError",
    "create_store",
    "define_family",
    "normalize",
]
