"""Exception types raised by the pickup watcher."""

from __future__ import annotations

from typing import Optional


class WatcherError(Exception):
    """Base class for watcher errors.

    Contextual fields are rendered after the message so log lines carry the
    request URL or channel name without callers formatting them.
    """

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        channel: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.message = message
        self.url = url
        self.channel = channel
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        context_parts: list[str] = []
        if self.channel:
            context_parts.append(f"channel={self.channel}")
        if self.url:
            context_parts.append(f"url={self.url}")
        if self.cause is not None:
            context_parts.append(f"cause={self.cause!r}")
        context = ", ".join(context_parts)
        return f"{self.message} ({context})" if context else self.message


class ConfigurationError(WatcherError):
    """Raised when the selectors cannot be resolved into a query."""


class FetchError(WatcherError):
    """Raised when the availability endpoint cannot be reached or decoded."""


class MalformedResponseError(WatcherError):
    """Raised when the endpoint returns JSON in an unexpected shape."""


class ChannelError(WatcherError):
    """Raised when a notification channel fails to deliver."""
