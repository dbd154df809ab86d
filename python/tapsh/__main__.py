"""Entry point for ``python -m tapsh``."""

from __future__ import annotations

from tapsh import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
