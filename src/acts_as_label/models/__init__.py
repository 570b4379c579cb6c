"""
Model interfaces for acts_as_label.

This module provides the base model classes for entities carrying a
system label and a friendly label.
"""

from .labeled_model import Label, LabeledModel, define_family

__all__ = ["Label", "LabeledModel", "define_family"]
