"""Directory scanning and sibling ordering.

One call lists one directory: hidden names are filtered, git-ignored names are
optionally dropped, and the survivors are stat'ed and sorted.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import DirectoryListError, ExternalToolFailed
from .gitignore import GitCheckIgnore, IgnoreClassifier
from .types import FileEntry, TreeOptions, create_entry, entry_sort_key, is_hidden_name

logger = logging.getLogger(__name__)


def _scan_names(directory: Path, show_hidden: bool) -> list[str]:
    """Return visible child names of ``directory`` in enumeration order."""
    names: list[str] = []
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                if not show_hidden and is_hidden_name(child.name):
                    continue
                names.append(child.name)
    except OSError as exc:
        raise DirectoryListError(directory, exc.strerror or str(exc)) from exc
    return names


def _ignored_names(
    directory: Path,
    names: list[str],
    classifier: IgnoreClassifier,
) -> frozenset[str]:
    """Ask ``classifier`` for ignored names, treating tool failure as none."""
    try:
        return classifier(directory, names)
    except ExternalToolFailed as exc:
        logger.debug("%s; listing unfiltered", exc)
        return frozenset()


def list_sorted(
    directory: Path,
    options: TreeOptions,
    classifier: IgnoreClassifier | None = None,
) -> list[FileEntry]:
    """List ``directory``'s visible children as sorted ``FileEntry`` rows.

    Raises ``DirectoryListError`` when the directory cannot be read and
    ``EntryCreationError`` when a child cannot be stat'ed.
    """
    names = _scan_names(directory, options.show_hidden)

    if options.ignore_vcs_excluded and names:
        if classifier is None:
            classifier = GitCheckIgnore(timeout=options.ignore_timeout)
        ignored = _ignored_names(directory, names, classifier)
        if ignored:
            names = [name for name in names if name not in ignored]

    entries = [create_entry(directory, name) for name in names]
    entries.sort(key=entry_sort_key)
    return entries


__all__ = ["list_sorted"]
