"""
Module: storage.file_locking

Purpose:
    Cross-platform file locking for the JSONL stores, so several processes
    (CLI prefetch, a web worker) can share one store file.
    Uses portalocker for Mac, Windows, and Linux compatibility.

Key Functions:
    - locked_file: Context manager for locked file access
    - locked_read_text: Read a whole file under a shared lock
    - locked_read_modify_write_text: Rewrite a file under an exclusive lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - storage.jsonl: JsonlQuestionStore, JsonlResultStore
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generator, TextIO, TypeVar

import portalocker

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'r',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator[TextIO, None, None]:
    """
    Context manager for cross-platform locked file access.

    Args:
        path: Path to file.
        mode: File open mode ('r', 'r+', 'a', ...).
        lock_type: Lock type (LOCK_EX for exclusive, LOCK_SH for shared).

    Yields:
        Open file handle with lock held.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Ensure file exists for read modes
    if 'r' in mode and not path.exists():
        path.touch()

    with open(path, mode, encoding='utf-8') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def locked_read_text(path: Path) -> str:
    """Read the whole file while holding a shared lock."""
    with locked_file(path, 'r', portalocker.LOCK_SH) as f:
        return f.read()


def locked_read_modify_write_text(
    path: Path,
    modifier: Callable[[str], tuple[str, T]],
) -> T:
    """
    Read text, apply modifier, write back - all with exclusive lock.

    Args:
        path: Path to file.
        modifier: Takes the current content, returns (new content, value).

    Returns:
        The value returned by modifier.
    """
    with locked_file(path, 'r+', portalocker.LOCK_EX) as f:
        f.seek(0)
        content = f.read()

        new_content, value = modifier(content)

        if new_content != content:
            f.seek(0)
            f.truncate()
            f.write(new_content)
            f.flush()
            logger.debug(f"Rewrote {path.name} ({len(new_content)} bytes)")

        return value
