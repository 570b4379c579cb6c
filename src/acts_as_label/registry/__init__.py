"""
Label registry for acts_as_label.

This module provides the registry mapping label families and system
labels to stored entities.
"""

from .accessor import LabelFamilyAccessor
from .label_registry import LabelRegistry, LabelRegistryEntry
from .options import LabelFamily, LabelOptions

__all__ = ["LabelFamily", "LabelFamilyAccessor", "LabelOptions", "LabelRegistry", "LabelRegistryEntry"]
