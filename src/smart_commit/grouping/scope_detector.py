"""
Infer a short scope (module or component name) from changed paths.

Three strategies are tried in order, the first non-empty answer wins:

1. build-marker: a changed build file names its module by its parent
   directory; otherwise the deepest meaningful segment of the common
   directory prefix is used.
2. package: the last meaningful segment of the common directory prefix.
3. common directory: the last segment of the common directory prefix,
   without filtering.

"Meaningful" means not one of the generic layout directories such as
``src`` or ``main``.
"""

from __future__ import annotations

from typing import List, Sequence

from smart_commit.diff.models import DiffSummary, FileDiff


MODULE_MARKERS = frozenset({
    "build.gradle",
    "build.gradle.kts",
    "pom.xml",
    "package.json",
    "Cargo.toml",
    "go.mod",
    "CMakeLists.txt",
    "setup.py",
    "pyproject.toml",
    "build.sbt",
    "Gemfile",
})

GENERIC_DIRS = frozenset({
    "src", "main", "java", "kotlin", "scala", "resources",
    "test", "tests", "spec", "lib", "app", "com", "org", "net", "io",
})


def detect_scope(summary: DiffSummary) -> str:
    """Return the best scope for the summary, or ``""`` if none is found."""
    if summary.is_empty:
        return ""
    diffs = summary.file_diffs
    return (
        _scope_from_modules(diffs)
        or _scope_from_package(diffs)
        or _scope_from_common_directory(diffs)
    )


def _scope_from_modules(diffs: Sequence[FileDiff]) -> str:
    for fd in diffs:
        if fd.file_name in MODULE_MARKERS:
            module = fd.directory.rsplit("/", 1)[-1]
            if module and module not in GENERIC_DIRS:
                return module

    segment_lists = [
        [seg for seg in fd.directory.split("/") if seg] for fd in diffs
    ]
    segment_lists = [segs for segs in segment_lists if segs]
    if not segment_lists:
        return ""
    common = _common_segments(segment_lists)
    return _last_meaningful(common)


def _scope_from_package(diffs: Sequence[FileDiff]) -> str:
    common = _common_directory(diffs)
    if not common:
        return ""
    return _last_meaningful(common.split("/"))


def _scope_from_common_directory(diffs: Sequence[FileDiff]) -> str:
    common = _common_directory(diffs).rstrip("/")
    return common.rsplit("/", 1)[-1] if common else ""


def _common_directory(diffs: Sequence[FileDiff]) -> str:
    dirs = [fd.directory for fd in diffs if fd.directory]
    if not dirs:
        return ""
    return "/".join(_common_segments([d.split("/") for d in dirs]))


def _common_segments(segment_lists: Sequence[Sequence[str]]) -> List[str]:
    common: List[str] = []
    for column in zip(*segment_lists):
        if any(seg != column[0] for seg in column):
            break
        common.append(column[0])
    return common


def _last_meaningful(segments: Sequence[str]) -> str:
    for seg in reversed(segments):
        if seg.strip() and seg not in GENERIC_DIRS:
            return seg
    return ""
