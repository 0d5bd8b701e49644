"""Module entrypoint for `python -m zonaldrill`."""

from __future__ import annotations

from zonaldrill.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
