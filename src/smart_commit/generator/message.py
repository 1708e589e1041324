"""
The commit message produced by every generator.

Follows the usual Git layout: a single-line title, then optionally a
blank line and a body, then optionally a blank line and a footer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional


_WHITESPACE_RUN = re.compile(r"\s{2,}")
ELLIPSIS = "..."


@dataclass(frozen=True)
class GeneratedCommitMessage:
    """Immutable commit message.

    Attributes
    ----------
    title : str
        Subject line; must not be blank.
    body : Optional[str]
        Explanatory text, if any.
    footer : Optional[str]
        Issue references, breaking change notes, if any.

    Raises
    ------
    ValueError
        If ``title`` is blank.
    """

    title: str
    body: Optional[str] = None
    footer: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("Commit message title must not be blank")

    @classmethod
    def title_only(cls, title: str) -> "GeneratedCommitMessage":
        return cls(title=title)

    def format(self) -> str:
        """Render the message as the final commit text."""
        parts = [self.title]
        if self.body and self.body.strip():
            parts.append(self.body)
        if self.footer and self.footer.strip():
            parts.append(self.footer)
        return "\n\n".join(parts)

    def with_truncated_title(self, max_length: int = 72) -> "GeneratedCommitMessage":
        """Return a copy whose title is at most ``max_length`` characters.

        Truncated titles end with ``"..."``. Lengths are counted in code
        points, so multi-byte characters such as emoji are never split.
        Limits shorter than the ellipsis cut the title without one.

        Raises
        ------
        ValueError
            If ``max_length`` is not positive.
        """
        if max_length <= 0:
            raise ValueError(f"max_length must be positive, got {max_length}")
        if len(self.title) <= max_length:
            return self
        if max_length < len(ELLIPSIS):
            return replace(self, title=self.title[:max_length])
        return replace(self, title=self.title[: max_length - len(ELLIPSIS)] + ELLIPSIS)

    def sanitized(self) -> "GeneratedCommitMessage":
        """Return a copy with a single-line, whitespace-normalised title."""
        clean = self.title.replace("\n", " ").replace("\r", " ")
        clean = _WHITESPACE_RUN.sub(" ", clean).strip()
        if clean == self.title:
            return self
        return replace(self, title=clean)

    def without_details(self) -> "GeneratedCommitMessage":
        """Return a title-only copy (one-line commit style)."""
        if self.body is None and self.footer is None:
            return self
        return replace(self, body=None, footer=None)
