"""
Diff models and utilities.

:mod:`smart_commit.diff.models` holds the value types,
:mod:`smart_commit.diff.diff_utils` the text utilities and
:mod:`smart_commit.diff.analyzer` the adapter from VCS change records.
"""

from .models import ChangeCategory, ChangeType, DiffSummary, FileDiff  # noqa: F401
from .analyzer import ChangeRecord, DiffAnalyzer  # noqa: F401
