"""Thin wrapper module for running the watcher without installing it."""

from __future__ import annotations

from apple_pickup_watcher.cli import main

__all__ = ["main"]

if __name__ == "__main__":
    main()
