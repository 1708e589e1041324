"""
Value types describing a set of staged file changes.

The types in this module carry no behaviour beyond derived, read-only
properties. A :class:`DiffSummary` is built once per commit message
request and discarded afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple


class ChangeType(Enum):
    """Type of VCS operation recorded for a single file."""

    NEW = "new"
    MODIFIED = "modified"
    DELETED = "deleted"
    MOVED = "moved"
    RENAMED = "renamed"

    @property
    def is_addition(self) -> bool:
        return self is ChangeType.NEW

    @property
    def is_removal(self) -> bool:
        return self is ChangeType.DELETED

    @property
    def is_relocation(self) -> bool:
        return self in (ChangeType.MOVED, ChangeType.RENAMED)

    @property
    def is_content_change(self) -> bool:
        return self in (ChangeType.MODIFIED, ChangeType.MOVED, ChangeType.RENAMED)

    @property
    def short_code(self) -> str:
        """Single-letter status code used in file listings."""
        return _SHORT_CODES[self]

    @property
    def label(self) -> str:
        """Human readable label used in diff section headers."""
        return _TYPE_LABELS[self]


_SHORT_CODES = {
    ChangeType.NEW: "A",
    ChangeType.MODIFIED: "M",
    ChangeType.DELETED: "D",
    ChangeType.MOVED: "R",
    ChangeType.RENAMED: "R",
}

_TYPE_LABELS = {
    ChangeType.NEW: "new file",
    ChangeType.MODIFIED: "modified",
    ChangeType.DELETED: "deleted",
    ChangeType.MOVED: "moved",
    ChangeType.RENAMED: "renamed",
}


class ChangeCategory(Enum):
    """Semantic category of a change.

    Each member carries a lowercase ``label`` and a ``priority`` where 1
    is the most significant (FEATURE) and 9 the least (CHORE).
    """

    FEATURE = ("feature", 1)
    BUGFIX = ("fix", 2)
    REFACTOR = ("refactor", 3)
    TEST = ("test", 4)
    DOCS = ("docs", 5)
    STYLE = ("style", 6)
    BUILD = ("build", 7)
    CI = ("ci", 8)
    CHORE = ("chore", 9)

    def __init__(self, label: str, priority: int) -> None:
        self.label = label
        self.priority = priority

    @property
    def heading(self) -> str:
        """Pluralised name used as a section heading in message bodies."""
        return _CATEGORY_HEADINGS[self]

    @classmethod
    def dominant(cls, categories: Iterable["ChangeCategory"]) -> "ChangeCategory":
        """Return the highest priority category, or CHORE if there is none."""
        return min(categories, key=lambda c: c.priority, default=cls.CHORE)


_CATEGORY_HEADINGS = {
    ChangeCategory.FEATURE: "Features",
    ChangeCategory.BUGFIX: "Bug Fixes",
    ChangeCategory.REFACTOR: "Refactoring",
    ChangeCategory.TEST: "Tests",
    ChangeCategory.DOCS: "Documentation",
    ChangeCategory.STYLE: "Style",
    ChangeCategory.BUILD: "Build",
    ChangeCategory.CI: "CI",
    ChangeCategory.CHORE: "Chores",
}


@dataclass(frozen=True)
class FileDiff:
    """Structured representation of a single file's change.

    Attributes
    ----------
    file_path : str
        Path of the file after the change (before, for deletions).
    change_type : ChangeType
        The VCS operation.
    old_file_path : Optional[str]
        Path before the change. Only set for moves/renames whose path
        actually differs.
    file_extension : str
        Lowercase extension without the dot; empty if none.
    diff : Optional[str]
        Simplified unified diff text. ``None`` for binary files or when
        content was unavailable.
    lines_added, lines_deleted : int
        Changed line counts derived from ``diff``.
    is_binary : bool
        True if either revision looked binary.
    """

    file_path: str
    change_type: ChangeType
    old_file_path: Optional[str] = None
    file_extension: str = ""
    diff: Optional[str] = None
    lines_added: int = 0
    lines_deleted: int = 0
    is_binary: bool = False

    def __post_init__(self) -> None:
        if self.is_binary and self.diff is not None:
            raise ValueError("Binary file diffs must not carry diff text")
        if self.lines_added < 0 or self.lines_deleted < 0:
            raise ValueError("Changed line counts must be non-negative")

    @classmethod
    def from_diff(
        cls,
        file_path: str,
        change_type: ChangeType,
        diff: Optional[str] = None,
        old_file_path: Optional[str] = None,
        is_binary: bool = False,
    ) -> "FileDiff":
        """Build a FileDiff, deriving extension and line counts from ``diff``."""
        from smart_commit.diff.diff_utils import count_changed_lines, extract_extension

        if is_binary:
            diff = None
        added, deleted = count_changed_lines(diff)
        return cls(
            file_path=file_path,
            change_type=change_type,
            old_file_path=old_file_path,
            file_extension=extract_extension(file_path),
            diff=diff,
            lines_added=added,
            lines_deleted=deleted,
            is_binary=is_binary,
        )

    @property
    def total_changed_lines(self) -> int:
        return self.lines_added + self.lines_deleted

    @property
    def has_diff(self) -> bool:
        return bool(self.diff and self.diff.strip())

    @property
    def file_name(self) -> str:
        return self.file_path.rsplit("/", 1)[-1]

    @property
    def directory(self) -> str:
        idx = self.file_path.rfind("/")
        return self.file_path[:idx] if idx >= 0 else ""


@dataclass(frozen=True)
class DiffSummary:
    """Aggregated, classified view of all changes selected for a commit.

    ``categories`` is a sequence parallel to ``file_diffs``: the category
    at index ``i`` belongs to the file diff at index ``i``.
    """

    file_diffs: Tuple[FileDiff, ...] = ()
    categories: Tuple[ChangeCategory, ...] = field(default=())

    def __post_init__(self) -> None:
        # Accept any sequence but store tuples so the summary stays immutable.
        object.__setattr__(self, "file_diffs", tuple(self.file_diffs))
        object.__setattr__(self, "categories", tuple(self.categories))
        if len(self.file_diffs) != len(self.categories):
            raise ValueError(
                f"Every file diff needs exactly one category "
                f"({len(self.file_diffs)} diffs, {len(self.categories)} categories)"
            )

    @classmethod
    def empty(cls) -> "DiffSummary":
        return cls((), ())

    @classmethod
    def classify(cls, file_diffs: Sequence[FileDiff]) -> "DiffSummary":
        """Classify each diff and wrap the result in a summary."""
        from smart_commit.grouping.change_classifier import classify_all

        diffs = tuple(file_diffs)
        return cls(diffs, tuple(classify_all(diffs)))

    # ------------------------------------------------------------------
    # Classification access
    # ------------------------------------------------------------------
    @property
    def classifications(self) -> List[Tuple[FileDiff, ChangeCategory]]:
        return list(zip(self.file_diffs, self.categories))

    def category_of(self, index: int) -> ChangeCategory:
        return self.categories[index]

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------
    @property
    def total_files(self) -> int:
        return len(self.file_diffs)

    @property
    def total_lines_added(self) -> int:
        return sum(fd.lines_added for fd in self.file_diffs)

    @property
    def total_lines_deleted(self) -> int:
        return sum(fd.lines_deleted for fd in self.file_diffs)

    @property
    def new_files(self) -> List[FileDiff]:
        return [fd for fd in self.file_diffs if fd.change_type is ChangeType.NEW]

    @property
    def modified_files(self) -> List[FileDiff]:
        return [fd for fd in self.file_diffs if fd.change_type is ChangeType.MODIFIED]

    @property
    def deleted_files(self) -> List[FileDiff]:
        return [fd for fd in self.file_diffs if fd.change_type is ChangeType.DELETED]

    @property
    def moved_files(self) -> List[FileDiff]:
        return [fd for fd in self.file_diffs if fd.change_type.is_relocation]

    # ------------------------------------------------------------------
    # Groupings
    # ------------------------------------------------------------------
    @property
    def by_category(self) -> Dict[ChangeCategory, List[FileDiff]]:
        groups: Dict[ChangeCategory, List[FileDiff]] = {}
        for fd, category in zip(self.file_diffs, self.categories):
            groups.setdefault(category, []).append(fd)
        return groups

    @property
    def by_directory(self) -> Dict[str, List[FileDiff]]:
        groups: Dict[str, List[FileDiff]] = {}
        for fd in self.file_diffs:
            groups.setdefault(fd.directory, []).append(fd)
        return groups

    @property
    def by_extension(self) -> Dict[str, List[FileDiff]]:
        groups: Dict[str, List[FileDiff]] = {}
        for fd in self.file_diffs:
            groups.setdefault(fd.file_extension, []).append(fd)
        return groups

    # ------------------------------------------------------------------
    # Derived properties
    # ------------------------------------------------------------------
    @property
    def dominant_category(self) -> ChangeCategory:
        return ChangeCategory.dominant(self.categories)

    @property
    def is_all_new(self) -> bool:
        return bool(self.file_diffs) and all(
            fd.change_type is ChangeType.NEW for fd in self.file_diffs
        )

    @property
    def is_all_deleted(self) -> bool:
        return bool(self.file_diffs) and all(
            fd.change_type is ChangeType.DELETED for fd in self.file_diffs
        )

    @property
    def is_empty(self) -> bool:
        return not self.file_diffs

    @property
    def combined_diff(self) -> str:
        return "\n".join(fd.diff for fd in self.file_diffs if fd.diff is not None)

    @property
    def sorted_by_significance(self) -> List[FileDiff]:
        """Diffs ordered by changed lines (descending), then by path."""
        return sorted(self.file_diffs, key=lambda fd: (-fd.total_changed_lines, fd.file_path))
