"""Gitignore-aware name filtering.

Asks ``git check-ignore`` which children of one directory are ignored. The
query is batched: all candidate names go to git's stdin in one invocation per
directory and the ignored subset comes back. Both directions use NUL-terminated
records (``-z``) so names with quotes, backslashes, tabs or newlines pass through
unquoted.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable, Iterable, Iterator, Sequence
from pathlib import Path

from .errors import ExternalToolFailed

logger = logging.getLogger(__name__)

GIT_CHECK_IGNORE_ARGV = ("git", "check-ignore", "--stdin", "-z")
RECORD_SEPARATOR = b"\0"
# 0: some paths ignored, 1: none ignored. Anything else is a failure.
CHECK_IGNORE_OK_STATUSES = frozenset({0, 1})

IgnoreClassifier = Callable[[Path, Sequence[str]], frozenset[str]]


def iter_output_records(
    chunks: Iterable[bytes],
    separator: bytes = RECORD_SEPARATOR,
) -> Iterator[bytes]:
    """Yield complete ``separator``-terminated records from ``chunks``.

    Records split across chunk boundaries are reassembled, and a trailing
    record without a final separator is still yielded once the input is
    exhausted. Empty records are dropped.
    """
    pending = bytearray()
    for chunk in chunks:
        pending.extend(chunk)
        start = 0
        while True:
            end_idx = pending.find(separator, start)
            if end_idx < 0:
                break
            record = bytes(pending[start:end_idx])
            if record:
                yield record
            start = end_idx + len(separator)
        del pending[:start]
    if pending:
        yield bytes(pending)


def _encode_candidates(names: Iterable[str]) -> bytes:
    """Encode names as NUL-terminated filesystem bytes."""
    return b"".join(os.fsencode(name) + RECORD_SEPARATOR for name in names)


def check_ignored_batch(
    directory: Path,
    names: Sequence[str],
    timeout: float | None = None,
) -> frozenset[str]:
    """Return the subset of ``names`` that git reports as ignored in ``directory``.

    Raises ``ExternalToolFailed`` when git cannot be spawned, exits with a
    status other than 0 or 1 (for example outside a repository), or exceeds
    ``timeout``.
    """
    payload = _encode_candidates(names)
    if not payload:
        return frozenset()

    argv = GIT_CHECK_IGNORE_ARGV
    logger.debug("running %s in %s for %d names", " ".join(argv), directory, len(names))
    try:
        proc = subprocess.run(
            list(argv),
            cwd=directory,
            input=payload,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise ExternalToolFailed(directory, f"timed out after {exc.timeout}s", argv) from exc
    except OSError as exc:
        raise ExternalToolFailed(directory, exc.strerror or str(exc), argv) from exc

    if proc.returncode not in CHECK_IGNORE_OK_STATUSES:
        raise ExternalToolFailed(
            directory,
            f"exited with status {proc.returncode}",
            argv,
            returncode=proc.returncode,
        )

    return frozenset(os.fsdecode(record) for record in iter_output_records((proc.stdout,)))


class GitCheckIgnore:
    """``IgnoreClassifier`` backed by ``git check-ignore --stdin -z``."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def __call__(self, directory: Path, names: Sequence[str]) -> frozenset[str]:
        return check_ignored_batch(directory, names, timeout=self.timeout)


__all__ = [
    "GIT_CHECK_IGNORE_ARGV",
    "IgnoreClassifier",
    "RECORD_SEPARATOR",
    "iter_output_records",
    "check_ignored_batch",
    "GitCheckIgnore",
]
