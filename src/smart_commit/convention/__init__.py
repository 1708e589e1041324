"""
Commit message conventions (Gitmoji, Conventional Commits, free-form).
"""

from .base import CommitConvention, ConventionType  # noqa: F401
from .conventional import ConventionalCommitsConvention  # noqa: F401
from .freeform import FreeFormConvention  # noqa: F401
from .gitmoji import GitmojiConvention  # noqa: F401
