"""Core package for the Apple pickup watcher application."""

__all__ = [
    "config",
    "exceptions",
    "models",
    "parts",
    "api_client",
    "checker",
    "notifier",
    "watcher",
    "cli",
]
