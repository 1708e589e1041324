"""
Git client implementation for smart_commit.

This module wraps the few Git operations the commit assistant needs:
listing staged changes, reading file contents from ``HEAD`` and from the
index, and committing. All subprocess calls go through
:meth:`GitClient._run` so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import posixpath
import subprocess
from pathlib import Path
from typing import List, Optional

from smart_commit.diff.analyzer import ChangeRecord


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                # reached filesystem root
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If git cannot be started, or if the command exits with a
            non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid characters instead of failing
            )
        except OSError as exc:
            logger.error("Failed to run git: %s", exc)
            raise GitError(f"Failed to run git: {exc}") from exc

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Staged changes
    # ------------------------------------------------------------------
    def get_staged_changes(self) -> List[ChangeRecord]:
        """Return one :class:`ChangeRecord` per staged file.

        Parses ``git diff --cached --name-status -M``. Renames (``R``) are
        reported as moves; copies (``C``) as new files. Content loaders
        read the old text from ``HEAD`` and the new text from the index,
        lazily, so nothing is read for files that never need a diff.

        Raises
        ------
        GitError
            If the diff command fails.
        """
        result = self._run(["diff", "--cached", "--name-status", "-M"], check=True)
        records: List[ChangeRecord] = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            parts = line.split("\t")
            record = self._record_from_status(parts)
            if record is None:
                logger.debug("Ignoring unrecognised status line: %r", line)
                continue
            records.append(record)
        return records

    def _record_from_status(self, parts: List[str]) -> Optional[ChangeRecord]:
        status = parts[0][:1]
        if status in ("R", "C") and len(parts) >= 3:
            old_path, new_path = parts[1], parts[2]
            if status == "C":
                return ChangeRecord(
                    after_path=new_path,
                    before_path=None,
                    kind="new",
                    load_after=self._index_loader(new_path),
                )
            renamed = posixpath.dirname(old_path) == posixpath.dirname(new_path)
            return ChangeRecord(
                after_path=new_path,
                before_path=old_path,
                kind="moved",
                renamed=renamed,
                load_before=self._head_loader(old_path),
                load_after=self._index_loader(new_path),
            )
        if len(parts) < 2:
            return None
        path = parts[1]
        if status == "A":
            return ChangeRecord(
                after_path=path,
                before_path=None,
                kind="new",
                load_after=self._index_loader(path),
            )
        if status == "D":
            return ChangeRecord(
                after_path=None,
                before_path=path,
                kind="deleted",
                load_before=self._head_loader(path),
            )
        if status in ("M", "T"):
            return ChangeRecord(
                after_path=path,
                before_path=path,
                kind="modified",
                load_before=self._head_loader(path),
                load_after=self._index_loader(path),
            )
        return None

    def show_head(self, path: str) -> str:
        """Content of ``path`` in ``HEAD``."""
        return self._run(["show", f"HEAD:{path}"], check=True).stdout

    def show_index(self, path: str) -> str:
        """Content of ``path`` as staged in the index."""
        return self._run(["show", f":{path}"], check=True).stdout

    def _head_loader(self, path: str):
        return lambda: self.show_head(path)

    def _index_loader(self, path: str):
        return lambda: self.show_index(path)

    # ------------------------------------------------------------------
    # Committing
    # ------------------------------------------------------------------
    def commit(self, message: str) -> None:
        """Create a commit of the staged changes with the given message.

        Multi-line commit messages are supported. If the commit fails,
        a GitError is raised.
        """
        self._run(["commit", "-m", message], check=True)
