"""Domain datatypes for one rendered directory level.

``FileEntry`` describes a single child of a listed directory and
``TreeOptions`` carries the per-invocation filters. The ordering relation used
to sort siblings lives here too so every caller sorts the same way.
"""

from __future__ import annotations

import errno
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from .errors import EntryCreationError

_BROKEN_LINK_ERRNOS = frozenset({errno.ENOENT, errno.ELOOP})


@dataclass(frozen=True)
class TreeOptions:
    """Filters and presentation switches fixed for one invocation."""

    show_hidden: bool = False
    max_depth: int | None = None
    ignore_vcs_excluded: bool = False
    color: bool = False
    ignore_timeout: float | None = None


@dataclass(frozen=True)
class FileEntry:
    """One immediate child of a listed directory.

    ``name`` may hold surrogate escapes for names that are not valid UTF-8;
    ``os.fsencode(name)`` always gives back the on-disk bytes.
    """

    name: str
    path: Path
    is_dir: bool
    is_hidden: bool


def is_hidden_name(name: str) -> bool:
    """Return whether ``name`` is a dotfile."""
    return name.startswith(".")


def create_entry(parent: Path, name: str) -> FileEntry:
    """Stat ``parent / name`` (following symlinks) and build its entry.

    A dangling or self-looping symlink is reported as a non-directory. Any other
    stat failure raises ``EntryCreationError``.
    """
    path = parent / name
    try:
        mode = os.stat(path).st_mode
    except OSError as exc:
        if exc.errno not in _BROKEN_LINK_ERRNOS:
            raise EntryCreationError(path, exc.strerror or str(exc)) from exc
        # Dangling or looping symlinks still exist as names.
        try:
            mode = os.lstat(path).st_mode
        except OSError:
            raise EntryCreationError(path, exc.strerror or str(exc)) from exc

    return FileEntry(
        name=name,
        path=path,
        is_dir=stat.S_ISDIR(mode),
        is_hidden=is_hidden_name(name),
    )


def _starts_with_ascii_upper(raw: bytes) -> bool:
    return bool(raw) and 0x41 <= raw[0] <= 0x5A


def entry_sort_key(entry: FileEntry) -> tuple[bool, bool, bool, bytes, bytes]:
    """Sort key: hidden, then directories, then uppercase-first, then name.

    Names compare on their filesystem bytes with only ASCII letters folded,
    and the raw bytes break any remaining tie.
    """
    raw = os.fsencode(entry.name)
    return (
        not entry.is_hidden,
        not entry.is_dir,
        not _starts_with_ascii_upper(raw),
        raw.lower(),
        raw,
    )


def compare_entries(left: FileEntry, right: FileEntry) -> int:
    """Three-way comparison consistent with ``entry_sort_key``."""
    left_key = entry_sort_key(left)
    right_key = entry_sort_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


__all__ = [
    "TreeOptions",
    "FileEntry",
    "is_hidden_name",
    "create_entry",
    "entry_sort_key",
    "compare_entries",
]
