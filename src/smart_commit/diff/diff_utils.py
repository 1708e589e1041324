"""
Pure text utilities for working with file diffs.

The diff produced by :func:`compute_simple_diff` is a simplified,
line-based format meant for language model consumption: changed lines
are prefixed with ``+``/``-``, context lines with a space, and hunks are
separated by a blank line. There are no ``@@`` hunk headers.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from smart_commit.diff.models import FileDiff


CHARS_PER_TOKEN = 4
BINARY_SNIFF_CHARS = 8000


class _Op(Enum):
    EQUAL = " "
    ADD = "+"
    REMOVE = "-"


def extract_extension(path: str) -> str:
    """Return the lowercase extension of the last path segment, without dot.

    An empty string is returned when the file name has no dot or ends
    with one.
    """
    file_name = path.rsplit("/", 1)[-1]
    dot = file_name.rfind(".")
    if dot < 0 or dot == len(file_name) - 1:
        return ""
    return file_name[dot + 1:].lower()


def is_binary_content(content: Optional[str]) -> bool:
    """Heuristically detect binary content by looking for NUL characters."""
    if content is None:
        return False
    return "\x00" in content[:BINARY_SNIFF_CHARS]


def count_changed_lines(diff: Optional[str]) -> Tuple[int, int]:
    """Count added and deleted lines in a diff.

    File header lines (``+++``/``---``) are not counted.

    Returns
    -------
    Tuple[int, int]
        ``(lines_added, lines_deleted)``.
    """
    if not diff or not diff.strip():
        return 0, 0
    added = deleted = 0
    for line in diff.splitlines():
        if line.startswith("+") and not line.startswith("+++"):
            added += 1
        elif line.startswith("-") and not line.startswith("---"):
            deleted += 1
    return added, deleted


def estimate_tokens(text: str) -> int:
    """Rough token estimate: one token per four characters, rounded up."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def compute_simple_diff(
    before: Optional[str],
    after: Optional[str],
    context_lines: int = 3,
) -> Optional[str]:
    """Compute a simplified line diff between two revisions of a file.

    Parameters
    ----------
    before : Optional[str]
        Content before the change; ``None`` for new files.
    after : Optional[str]
        Content after the change; ``None`` for deleted files.
    context_lines : int
        Number of unchanged lines kept around each change.

    Returns
    -------
    Optional[str]
        The diff text, or ``None`` if both inputs are ``None``.
    """
    if before is None and after is None:
        return None
    if before is None:
        return "\n".join("+" + line for line in after.splitlines())
    if after is None:
        return "\n".join("-" + line for line in before.splitlines())

    before_lines = before.splitlines()
    after_lines = after.splitlines()
    ops = _diff_ops(before_lines, after_lines)
    return _format_ops(ops, before_lines, after_lines, context_lines)


def _lcs_table(a: Sequence[str], b: Sequence[str]) -> List[List[int]]:
    m, n = len(a), len(b)
    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        row, prev = dp[i], dp[i - 1]
        ai = a[i - 1]
        for j in range(1, n + 1):
            if ai == b[j - 1]:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = max(prev[j], row[j - 1])
    return dp


def _diff_ops(a: Sequence[str], b: Sequence[str]) -> List[_Op]:
    dp = _lcs_table(a, b)
    ops: List[_Op] = []
    i, j = len(a), len(b)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and a[i - 1] == b[j - 1]:
            ops.append(_Op.EQUAL)
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or dp[i][j - 1] >= dp[i - 1][j]):
            ops.append(_Op.ADD)
            j -= 1
        else:
            ops.append(_Op.REMOVE)
            i -= 1
    ops.reverse()
    return ops


def _format_ops(
    ops: Sequence[_Op],
    before_lines: Sequence[str],
    after_lines: Sequence[str],
    context_lines: int,
) -> str:
    include = [False] * len(ops)
    for idx, op in enumerate(ops):
        if op is not _Op.EQUAL:
            lo = max(0, idx - context_lines)
            hi = min(len(ops) - 1, idx + context_lines)
            for k in range(lo, hi + 1):
                include[k] = True

    out: List[str] = []
    bi = ai = 0
    in_hunk = False
    for idx, op in enumerate(ops):
        if include[idx]:
            if not in_hunk:
                if out:
                    # blank separator line between hunks
                    out.append("")
                in_hunk = True
            if op is _Op.ADD:
                out.append("+" + after_lines[ai])
            else:
                out.append(op.value + before_lines[bi])
        else:
            in_hunk = False

        if op is _Op.EQUAL:
            bi += 1
            ai += 1
        elif op is _Op.ADD:
            ai += 1
        else:
            bi += 1

    return "\n".join(out).rstrip()


def format_file_header(file_diff: FileDiff) -> str:
    """Header line introducing one file in a combined diff section."""
    return (
        f"--- {file_diff.file_path} ({file_diff.change_type.label}, "
        f"+{file_diff.lines_added}/-{file_diff.lines_deleted}) ---\n"
    )


def truncate_diffs(file_diffs: Sequence[FileDiff], max_tokens: int) -> str:
    """Concatenate per-file diffs, most changed first, within a token budget.

    Files without diff text are skipped. When the budget runs out before
    a header fits, the remaining files are summarised in a single
    ``... and N more file(s) truncated`` line; when only part of a file's
    diff fits, it is cut and marked ``... (truncated)``.
    """
    candidates = sorted(
        (fd for fd in file_diffs if fd.has_diff),
        key=lambda fd: -fd.total_changed_lines,
    )
    parts: List[str] = []
    remaining = max_tokens

    for index, fd in enumerate(candidates):
        header = format_file_header(fd)
        header_tokens = estimate_tokens(header)
        if remaining <= header_tokens + 10:
            parts.append(f"\n... and {len(candidates) - index} more file(s) truncated\n")
            break

        parts.append(header)
        remaining -= header_tokens

        diff_tokens = estimate_tokens(fd.diff)
        if diff_tokens <= remaining:
            parts.append(fd.diff + "\n")
            remaining -= diff_tokens
        else:
            parts.append(fd.diff[: remaining * CHARS_PER_TOKEN])
            parts.append("\n... (truncated)\n")
            break

    return "".join(parts).rstrip()


def format_file_list(file_diffs: Sequence[FileDiff]) -> str:
    """One ``<X>  path`` line per diff, ``R  old → new`` for relocations."""
    lines = []
    for fd in file_diffs:
        code = fd.change_type.short_code
        if fd.change_type.is_relocation and fd.old_file_path is not None:
            lines.append(f"{code}  {fd.old_file_path} → {fd.file_path}")
        else:
            lines.append(f"{code}  {fd.file_path}")
    return "\n".join(lines)
