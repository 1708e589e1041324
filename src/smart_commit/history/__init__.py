"""
History of generated commit messages.
"""

from .store import CommitMessageHistory, HistorySink  # noqa: F401
