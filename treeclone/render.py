"""Render a directory tree as branch-drawn text lines.

The walk is depth-first: each directory level is listed, sorted, and written
one line per entry before descending into subdirectories. Output goes to any
object with a ``write(str)`` method; the caller owns and flushes the stream.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TextIO

from pygments.console import ansiformat

from .errors import DirectoryListError
from .gitignore import IgnoreClassifier
from .listing import list_sorted
from .types import FileEntry, TreeOptions

logger = logging.getLogger(__name__)

BRANCH_MIDDLE = "├── "
BRANCH_LAST = "└── "
PREFIX_CONTINUE = "│   "
PREFIX_BLANK = "    "
DIRECTORY_COLOR = "*blue*"


def format_entry_name(entry: FileEntry, color: bool) -> str:
    """Return the display name, bold blue for directories when ``color`` is on."""
    if color and entry.is_dir:
        return ansiformat(DIRECTORY_COLOR, entry.name)
    return entry.name


def _real_path(path: Path) -> str:
    return os.path.realpath(path)


def render_tree(
    directory: Path,
    prefix: str,
    options: TreeOptions,
    depth: int,
    writer: TextIO,
    classifier: IgnoreClassifier | None = None,
    ancestors: set[str] | None = None,
) -> None:
    """Write the subtree below ``directory``, one line per entry.

    ``depth`` is the depth of ``directory``'s children (0 for the root). Levels
    deeper than ``options.max_depth`` are neither listed nor written.
    ``ancestors`` holds real paths of the directories currently being walked;
    a child directory already in it is written but not descended into.
    """
    if options.max_depth is not None and depth > options.max_depth:
        return

    if ancestors is None:
        ancestors = {_real_path(directory)}

    entries = list_sorted(directory, options, classifier)
    last_idx = len(entries) - 1
    for idx, entry in enumerate(entries):
        is_last = idx == last_idx
        branch = BRANCH_LAST if is_last else BRANCH_MIDDLE
        writer.write(f"{prefix}{branch}{format_entry_name(entry, options.color)}\n")
        if not entry.is_dir:
            continue

        real = _real_path(entry.path)
        if real in ancestors:
            logger.debug("not descending into %s: symlink cycle via %s", entry.path, real)
            continue
        ancestors.add(real)
        try:
            render_tree(
                entry.path,
                prefix + (PREFIX_BLANK if is_last else PREFIX_CONTINUE),
                options,
                depth + 1,
                writer,
                classifier,
                ancestors,
            )
        finally:
            ancestors.discard(real)


def root_label(root: Path) -> str:
    """Return the header line text for ``root``: its basename, or the path itself."""
    return root.name or str(root)


def render_root(
    target: Path | str,
    options: TreeOptions,
    writer: TextIO,
    classifier: IgnoreClassifier | None = None,
) -> None:
    """Resolve ``target``, write its name as a header, then its whole tree."""
    try:
        root = Path(target).resolve(strict=True)
    except OSError as exc:
        raise DirectoryListError(target, exc.strerror or str(exc)) from exc
    if not root.is_dir():
        raise DirectoryListError(root, "Not a directory")

    label = root_label(root)
    if options.color:
        label = ansiformat(DIRECTORY_COLOR, label)
    writer.write(f"{label}\n")
    render_tree(root, "", options, 0, writer, classifier)


__all__ = [
    "BRANCH_MIDDLE",
    "BRANCH_LAST",
    "PREFIX_CONTINUE",
    "PREFIX_BLANK",
    "format_entry_name",
    "render_tree",
    "root_label",
    "render_root",
]
