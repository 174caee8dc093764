"""Module entry point: python -m radius_map ..."""

from __future__ import annotations

from radius_map.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
