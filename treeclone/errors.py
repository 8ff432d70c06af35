"""Error taxonomy for tree traversal.

Every failure carries the path and the operation that failed so the CLI can
report it in one line. Listing and stat failures are fatal for the render;
``ExternalToolFailed`` is expected and is downgraded by the directory lister.
"""

from __future__ import annotations

from pathlib import Path


class TreeError(Exception):
    """Base class for failures tied to one filesystem path."""

    operation = "process"

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(reason)
        self.path = Path(path)
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.operation} '{self.path}': {self.reason}"


class DirectoryListError(TreeError):
    """Directory could not be opened or enumerated."""

    operation = "cannot list directory"


class EntryCreationError(TreeError):
    """Metadata query for one directory child failed."""

    operation = "cannot stat entry"


class ExternalToolFailed(TreeError):
    """The ignore-rule tool was missing, failed, or timed out."""

    operation = "ignore check failed in"

    def __init__(
        self,
        path: Path | str,
        reason: str,
        argv: tuple[str, ...] = (),
        returncode: int | None = None,
    ) -> None:
        super().__init__(path, reason)
        self.argv = argv
        self.returncode = returncode


__all__ = [
    "TreeError",
    "DirectoryListError",
    "EntryCreationError",
    "ExternalToolFailed",
]
