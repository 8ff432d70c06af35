"""Tests for single-directory listing: filters, ignore integration, order."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from treeclone.errors import DirectoryListError, EntryCreationError, ExternalToolFailed
from treeclone.listing import list_sorted
from treeclone.types import TreeOptions


class FakeClassifier:
    """Records calls and returns a canned ignore set."""

    def __init__(self, ignored: frozenset[str] = frozenset(), error: Exception | None = None) -> None:
        self.ignored = ignored
        self.error = error
        self.calls: list[tuple[Path, list[str]]] = []

    def __call__(self, directory: Path, names) -> frozenset[str]:
        self.calls.append((directory, sorted(names)))
        if self.error is not None:
            raise self.error
        return self.ignored


class ListSortedTests(unittest.TestCase):
    def test_hidden_entries_are_dropped_unless_requested(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "a").write_text("a", encoding="utf-8")
            (root / ".b").write_text("b", encoding="utf-8")

            default = list_sorted(root, TreeOptions())
            with_hidden = list_sorted(root, TreeOptions(show_hidden=True))

            self.assertEqual([entry.name for entry in default], ["a"])
            self.assertEqual([entry.name for entry in with_hidden], [".b", "a"])

    def test_entries_are_sorted_and_carry_absolute_paths(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "src").mkdir()
            (root / "Docs").mkdir()
            (root / "README.md").write_text("x", encoding="utf-8")
            (root / "main.py").write_text("x", encoding="utf-8")

            entries = list_sorted(root, TreeOptions())

            self.assertEqual([entry.name for entry in entries], ["Docs", "src", "README.md", "main.py"])
            self.assertEqual([entry.is_dir for entry in entries], [True, True, False, False])
            self.assertTrue(all(entry.path == root / entry.name for entry in entries))

    def test_empty_directory_yields_empty_list(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(list_sorted(Path(tmp), TreeOptions()), [])

    def test_classifier_is_not_consulted_without_gitignore_option(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "ignored.txt").write_text("x", encoding="utf-8")
            classifier = FakeClassifier(frozenset({"ignored.txt"}))

            entries = list_sorted(root, TreeOptions(), classifier)

            self.assertEqual([entry.name for entry in entries], ["ignored.txt"])
            self.assertEqual(classifier.calls, [])

    def test_ignored_names_are_dropped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "ignored.txt").write_text("x", encoding="utf-8")
            (root / "visible.txt").write_text("x", encoding="utf-8")
            (root / ".hidden").write_text("x", encoding="utf-8")
            classifier = FakeClassifier(frozenset({"ignored.txt"}))

            entries = list_sorted(root, TreeOptions(ignore_vcs_excluded=True), classifier)

            self.assertEqual([entry.name for entry in entries], ["visible.txt"])
            self.assertEqual(classifier.calls, [(root, ["ignored.txt", "visible.txt"])])

    def test_tool_failure_means_nothing_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "ignored.txt").write_text("x", encoding="utf-8")
            (root / "visible.txt").write_text("x", encoding="utf-8")
            classifier = FakeClassifier(error=ExternalToolFailed(root, "exited with status 128", returncode=128))

            entries = list_sorted(root, TreeOptions(ignore_vcs_excluded=True), classifier)

            self.assertEqual([entry.name for entry in entries], ["ignored.txt", "visible.txt"])

    def test_empty_directory_skips_classifier(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            classifier = FakeClassifier()
            list_sorted(Path(tmp), TreeOptions(ignore_vcs_excluded=True), classifier)
            self.assertEqual(classifier.calls, [])

    def test_default_classifier_uses_configured_timeout(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "a.txt").write_text("x", encoding="utf-8")
            with mock.patch(
                "treeclone.listing.GitCheckIgnore.__call__",
                autospec=True,
                return_value=frozenset(),
            ) as call:
                list_sorted(root, TreeOptions(ignore_vcs_excluded=True, ignore_timeout=2.5))

            classifier = call.call_args.args[0]
            self.assertEqual(classifier.timeout, 2.5)

    def test_missing_directory_raises_directory_list_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp).resolve() / "missing"
            with self.assertRaises(DirectoryListError) as exc_info:
                list_sorted(missing, TreeOptions())

            self.assertEqual(exc_info.exception.path, missing)
            self.assertIsInstance(exc_info.exception.__cause__, FileNotFoundError)

    def test_stat_failure_propagates(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "a.txt").write_text("x", encoding="utf-8")
            with mock.patch("treeclone.types.os.stat", side_effect=PermissionError(13, "Permission denied")):
                with self.assertRaises(EntryCreationError):
                    list_sorted(root, TreeOptions())

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks are required")
    def test_broken_symlinks_are_listed_as_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "real").mkdir()
            try:
                os.symlink(root / "missing-target", root / "dangling")
                os.symlink(root / "self-loop", root / "self-loop")
            except OSError:
                self.skipTest("cannot create symlinks here")

            entries = list_sorted(root, TreeOptions())

            self.assertEqual([entry.name for entry in entries], ["real", "dangling", "self-loop"])
            self.assertEqual([entry.is_dir for entry in entries], [True, False, False])
            self.assertTrue(os.path.islink(entries[1].path))

    def test_non_utf8_names_are_listed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            raw_path = os.path.join(os.fsencode(root), b"caf\xe9.txt")
            try:
                with open(raw_path, "wb") as handle:
                    handle.write(b"x")
            except OSError:
                self.skipTest("filesystem rejects non-UTF-8 names")

            entries = list_sorted(root, TreeOptions())

            self.assertEqual(len(entries), 1)
            self.assertEqual(os.fsencode(entries[0].name), b"caf\xe9.txt")
            self.assertFalse(entries[0].is_dir)


if __name__ == "__main__":
    unittest.main()
