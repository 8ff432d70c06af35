"""Module entrypoint for ``python -m treeclone``.

This keeps module-mode execution behavior identical to the CLI script.
All argument parsing and rendering setup happen in ``treeclone.cli``.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
