# src/zuora/__main__.py
from __future__ import annotations

import sys
from typing import Optional, Sequence

from .cli import cli


def _configure_stdio() -> None:
    # Query results may carry any tenant data; never crash on unencodable chars.
    for stream in (sys.stdout, sys.stderr):
        reconfigure = getattr(stream, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(encoding="utf-8", errors="backslashreplace")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for ``zuora`` and ``python -m zuora``."""
    _configure_stdio()
    cli.main(args=list(argv) if argv is not None else None, prog_name="zuora")


if __name__ == "__main__":
    main()
