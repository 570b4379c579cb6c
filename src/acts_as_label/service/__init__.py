"""
Service API for acts_as_label.

This module provides the REST API for resolving labeled entities.
"""

from .api import LabelResponse, create_app, start_api

__all__ = ["LabelResponse", "create_app", "start_api"]
