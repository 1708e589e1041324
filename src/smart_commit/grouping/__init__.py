"""
Classification and scope inference for file changes.

See :mod:`smart_commit.grouping.change_classifier` for the category rules
and :mod:`smart_commit.grouping.scope_detector` for scope inference.
"""

from .change_classifier import classify_all, classify_change  # noqa: F401
from .scope_detector import detect_scope  # noqa: F401
