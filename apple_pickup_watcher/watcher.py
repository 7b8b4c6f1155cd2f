"""Poll loop that watches a single part until a store has it."""

from __future__ import annotations

import logging
import sys
import time
from typing import Callable, List, Optional, TextIO

from .api_client import AppleStoreClient
from .checker import filter_available_stores
from .exceptions import FetchError, MalformedResponseError
from .models import PollState, Query, StoreRecord, WatchStatus
from .notifier import Notifier

logger = logging.getLogger(__name__)

STATUS_REFRESH_SECONDS = 1.0


class StatusLine:
    """In-place terminal status showing time since the last request."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream
        self._dirty = False

    def render(self, state: PollState, now: float) -> None:
        seconds = state.seconds_since_last_request(now)
        if seconds is None:
            return
        stream = self.stream or sys.stdout
        stream.write(
            f"\rStatus: Device not available. Last request made {seconds} seconds ago "
            f"({state.requests_made} requests)"
        )
        stream.flush()
        self._dirty = True

    def clear(self) -> None:
        if self._dirty:
            (self.stream or sys.stdout).write("\n")
            self._dirty = False


class StockWatcher:
    """Fetch, filter and wait on a fixed delay until stock shows up.

    The watcher has no attempt limit: ``run`` only returns once at least one
    store matches, after handing the stores to the notifier exactly once.
    Fetch failures and malformed responses count as an empty cycle, except
    that a malformed response is re-raised when ``strict`` is set.

    The status line is redrawn once a second from ``wait`` only; while a
    request is in flight it stays frozen for at most the request timeout.
    """

    def __init__(
        self,
        query: Query,
        client: AppleStoreClient,
        notifier: Notifier,
        status_line: Optional[StatusLine] = None,
        strict: bool = False,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.query = query
        self.client = client
        self.notifier = notifier
        self.status_line = status_line or StatusLine()
        self.strict = strict
        self.sleep = sleep
        self.clock = clock
        self.state = PollState(started_at=clock())
        self.status = WatchStatus.WAITING_FOR_STOCK

    def tick(self) -> List[StoreRecord]:
        requested_at = self.clock()
        try:
            response = self.client.fetch(self.query)
        except FetchError as exc:
            self.state.fetch_errors += 1
            logger.warning("Fetch failed, retrying in %ss: %s", self.query.poll_interval, exc)
            return []
        finally:
            self.state.record_request(requested_at)

        try:
            stores = filter_available_stores(response, self.query)
        except MalformedResponseError as exc:
            self.state.malformed_responses += 1
            logger.error("Unexpected response from %s: %s", self.query.url, exc)
            if self.strict:
                raise
            return []

        if not stores:
            logger.debug("Request %s: part %s not available", self.state.requests_made, self.query.part_number)
        return stores

    def wait(self, interval: float) -> None:
        deadline = self.clock() + interval
        while True:
            remaining = deadline - self.clock()
            if remaining <= 0:
                break
            self.status_line.render(self.state, self.clock())
            self.sleep(min(STATUS_REFRESH_SECONDS, remaining))

    def run(self) -> List[StoreRecord]:
        logger.info(
            "Watching part %s near %s every %ss",
            self.query.part_number,
            self.query.zip_code,
            self.query.poll_interval,
        )
        while self.status is WatchStatus.WAITING_FOR_STOCK:
            stores = self.tick()
            if stores:
                self.status = WatchStatus.DONE
                self.status_line.clear()
                logger.info(
                    "Found %s stores after %s requests (%s failed) in %.0fs",
                    len(stores),
                    self.state.requests_made,
                    self.state.fetch_errors,
                    self.state.elapsed(self.clock()),
                )
                for store in stores:
                    logger.info("Available at %s", store)
                self.notifier.notify(stores)
                return stores
            self.wait(self.query.poll_interval)
        return []
