"""
Core domain layer: record set abstraction, diagnostics, view base class,
and the view registry
"""

from .dataset import RecordSet
from .base_view import BaseView
from .view_registry import ViewRegistry

__all__ = ["RecordSet", "BaseView", "ViewRegistry"]
