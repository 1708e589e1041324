"""
Turn raw VCS change records into classified file diffs.

A change record is whatever the version control layer hands us for a
single file: its paths, what kind of change it is, and two loaders for
the before/after text. Loaders may fail; a failing loader only costs
that file its diff text, it never drops the file or the request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from smart_commit.diff.diff_utils import compute_simple_diff, is_binary_content
from smart_commit.diff.models import ChangeType, DiffSummary, FileDiff


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


ContentLoader = Callable[[], Optional[str]]


def _no_content() -> Optional[str]:
    return None


@dataclass(frozen=True)
class ChangeRecord:
    """A single change as reported by the version control layer.

    Attributes
    ----------
    after_path : Optional[str]
        Path after the change, ``None`` for deletions.
    before_path : Optional[str]
        Path before the change, ``None`` for additions.
    kind : str
        One of ``"new"``, ``"deleted"``, ``"modified"`` or ``"moved"``.
    renamed : bool
        For moves, True when only the file name changed.
    load_before, load_after : Callable[[], Optional[str]]
        Fetch the text of each revision. May raise.
    """

    after_path: Optional[str]
    before_path: Optional[str]
    kind: str
    renamed: bool = False
    load_before: ContentLoader = _no_content
    load_after: ContentLoader = _no_content


class DiffAnalyzer:
    """Build :class:`FileDiff` objects and a :class:`DiffSummary` from change records."""

    def __init__(self, records: Iterable[ChangeRecord]) -> None:
        self.records = list(records)

    def extract_file_diffs(self) -> List[FileDiff]:
        diffs: List[FileDiff] = []
        for record in self.records:
            try:
                diffs.append(self._extract_single(record))
            except Exception as exc:  # noqa: BLE001
                logger.warning("Skipping unusable change record %r: %s", record, exc)
        return diffs

    def analyze(self) -> DiffSummary:
        return DiffSummary.classify(self.extract_file_diffs())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _extract_single(self, record: ChangeRecord) -> FileDiff:
        change_type = map_change_type(record.kind, record.renamed)
        file_path = record.after_path or record.before_path
        if not file_path:
            raise ValueError("change has neither a before nor an after path")

        old_path = None
        if change_type.is_relocation and record.before_path and record.before_path != file_path:
            old_path = record.before_path

        before = _safe_load(record.load_before, record.before_path) if record.before_path else None
        after = _safe_load(record.load_after, record.after_path) if record.after_path else None

        is_binary = is_binary_content(before) or is_binary_content(after)
        diff = None if is_binary else compute_simple_diff(before, after)

        return FileDiff.from_diff(
            file_path,
            change_type,
            diff=diff,
            old_file_path=old_path,
            is_binary=is_binary,
        )


def map_change_type(kind: str, renamed: bool = False) -> ChangeType:
    """Map a VCS change kind to a :class:`ChangeType`."""
    kind = kind.lower()
    if kind == "new":
        return ChangeType.NEW
    if kind == "deleted":
        return ChangeType.DELETED
    if kind == "moved":
        return ChangeType.RENAMED if renamed else ChangeType.MOVED
    if kind == "modified":
        return ChangeType.MODIFIED
    raise ValueError(f"unknown change kind '{kind}'")


def _safe_load(loader: ContentLoader, path: Optional[str]) -> Optional[str]:
    try:
        return loader()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Failed to read content for %s: %s", path, exc)
        return None
