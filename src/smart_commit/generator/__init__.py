"""
Deterministic commit message generation.

Contains the :class:`GeneratedCommitMessage` value type, the generator
contract and the template based generator used on its own or as the AI
fallback.
"""

from .base import CommitMessageGenerator, EmptyChangesetError  # noqa: F401
from .message import GeneratedCommitMessage  # noqa: F401
from .template_generator import TemplateGenerator  # noqa: F401
