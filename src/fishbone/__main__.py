"""Module entrypoint for ``python -m fishbone``."""

from __future__ import annotations

from fishbone.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
