"""
Persistent history of generated commit messages.

Messages are kept in a JSON file (``~/.smart_commit/history.json`` by
default), most recent first, bounded to :data:`MAX_HISTORY_SIZE`
entries. Adding a message that is already stored moves it to the front
instead of duplicating it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Protocol


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


MAX_HISTORY_SIZE = 50
HISTORY_FILE_NAME = "history.json"


class HistorySink(Protocol):
    """Anything that accepts finished commit message text."""

    def append(self, message: str) -> None:
        ...


def default_history_path() -> Path:
    from smart_commit.config.loader import _get_config_directory

    return _get_config_directory() / HISTORY_FILE_NAME


class CommitMessageHistory:
    """Bounded, de-duplicated list of past commit messages.

    Parameters
    ----------
    path : Optional[Path]
        JSON file backing the history. Defaults to
        :func:`default_history_path`.
    max_size : int
        Maximum number of messages retained.
    """

    def __init__(self, path: Optional[Path] = None, max_size: int = MAX_HISTORY_SIZE) -> None:
        self.path = path if path is not None else default_history_path()
        self.max_size = max_size
        self._messages: List[str] = self._load()

    def _load(self) -> List[str]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable history file %s: %s", self.path, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Ignoring malformed history file %s", self.path)
            return []
        messages = [m for m in data if isinstance(m, str) and m.strip()]
        return messages[: self.max_size]

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(self._messages, ensure_ascii=False, indent=2), encoding="utf-8"
        )

    def add(self, message: str) -> None:
        """Store ``message`` as the most recent entry. Blank messages are ignored."""
        trimmed = message.strip()
        if not trimmed:
            return
        if trimmed in self._messages:
            self._messages.remove(trimmed)
        self._messages.insert(0, trimmed)
        del self._messages[self.max_size :]
        self._save()

    append = add

    def get_all(self) -> List[str]:
        return list(self._messages)

    def latest(self) -> Optional[str]:
        return self._messages[0] if self._messages else None

    def size(self) -> int:
        return len(self._messages)

    def clear(self) -> None:
        self._messages.clear()
        self._save()
