"""Command-line front door for treeclone.

Scans flags into ``TreeOptions`` on top of the config-file defaults, resolves
the target directory, and writes the rendered tree to stdout.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass, replace

from . import __version__
from .config import load_config, load_default_options, load_log_level
from .errors import TreeError
from .render import render_root
from .types import TreeOptions

logger = logging.getLogger(__name__)

PROG = "treeclone"
LOG_FORMAT = f"{PROG}: %(levelname)s: %(message)s"
USAGE = f"""\
usage: {PROG} [-a] [-g] [-L N] [-C | -n] [PATH]

List the contents of PATH (default: current directory) as a tree.

options:
  -a, --all            show hidden entries (names starting with '.')
  -L, --max-depth N    descend at most N levels below PATH's children
  -g, --gitignore      hide entries ignored by git
  -C, --color          color directory names
  -n, --no-color       disable color
  -h, --help           show this help and exit
      --version        show version and exit
"""


@dataclass(frozen=True)
class ParseResult:
    """Options and target resolved from command-line tokens."""

    options: TreeOptions
    target_path: str = "."
    show_help: bool = False
    show_version: bool = False


def _parse_depth(token: str) -> int | None:
    """Return ``token`` as a non-negative integer, or ``None`` if it is not one."""
    if not token.isascii() or not token.isdigit():
        return None
    return int(token)


def parse_args(argv: Sequence[str], defaults: TreeOptions | None = None) -> ParseResult:
    """Scan ``argv`` (without the program name) left to right.

    A depth flag only consumes the next token when that token is a valid
    depth; otherwise the flag is ignored. Single-dash tokens are bundles of
    one-letter flags and unknown letters or long flags are ignored. The last
    non-flag token is the target path.
    """
    options = defaults if defaults is not None else TreeOptions()
    target_path = "."
    show_help = False
    show_version = False

    idx = 0
    while idx < len(argv):
        arg = argv[idx]
        idx += 1
        if arg in ("-L", "--max-depth"):
            if idx < len(argv):
                depth = _parse_depth(argv[idx])
                if depth is not None:
                    options = replace(options, max_depth=depth)
                    idx += 1
        elif arg == "--all":
            options = replace(options, show_hidden=True)
        elif arg == "--gitignore":
            options = replace(options, ignore_vcs_excluded=True)
        elif arg == "--color":
            options = replace(options, color=True)
        elif arg == "--no-color":
            options = replace(options, color=False)
        elif arg == "--help":
            show_help = True
        elif arg == "--version":
            show_version = True
        elif arg.startswith("--"):
            continue
        elif arg.startswith("-"):
            for flag in arg[1:]:
                if flag == "a":
                    options = replace(options, show_hidden=True)
                elif flag == "g":
                    options = replace(options, ignore_vcs_excluded=True)
                elif flag == "C":
                    options = replace(options, color=True)
                elif flag == "n":
                    options = replace(options, color=False)
                elif flag == "h":
                    show_help = True
        else:
            target_path = arg

    return ParseResult(
        options=options,
        target_path=target_path,
        show_help=show_help,
        show_version=show_version,
    )


def _configure_logging(level: int) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, render the tree to stdout, and return an exit code."""
    if argv is None:
        argv = sys.argv[1:]

    config = load_config()
    parsed = parse_args(argv, defaults=load_default_options(config))
    if parsed.show_help:
        sys.stdout.write(USAGE)
        return 0
    if parsed.show_version:
        sys.stdout.write(f"{PROG} {__version__}\n")
        return 0

    _configure_logging(load_log_level(config))
    logger.debug("rendering %s with %s", parsed.target_path, parsed.options)
    stdout = sys.stdout
    if hasattr(stdout, "reconfigure"):
        # Non-UTF-8 names carry surrogate escapes; emit their original bytes.
        stdout.reconfigure(errors="surrogateescape")

    try:
        render_root(parsed.target_path, parsed.options, stdout)
        stdout.flush()
    except TreeError as exc:
        stdout.flush()
        sys.stderr.write(f"{PROG}: {exc}\n")
        return 1
    except BrokenPipeError:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, stdout.fileno())
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
