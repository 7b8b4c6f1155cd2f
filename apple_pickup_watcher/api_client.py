"""HTTP client for Apple's retail pickup-message endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import HEADERS, Config
from .exceptions import FetchError
from .models import Query

logger = logging.getLogger(__name__)


class AppleStoreClient:
    """Issue one availability request per call; retries belong to the caller."""

    def __init__(
        self, session: Optional[requests.Session] = None, timeout: Optional[float] = None
    ) -> None:
        self.session = session or requests.Session()
        self.session.headers.update(HEADERS)
        self.timeout = float(timeout if timeout is not None else Config.REQUEST_TIMEOUT)

    def __enter__(self) -> "AppleStoreClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def fetch(self, query: Query) -> Dict[str, Any]:
        logger.debug("Requesting %s", query.url)
        try:
            response = self.session.get(query.endpoint, params=query.params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError("Availability request failed", url=query.url, cause=exc) from exc

        if not response.ok:
            raise FetchError(f"Availability endpoint returned HTTP {response.status_code}", url=query.url)

        try:
            data: Dict[str, Any] = response.json()
        except ValueError as exc:
            raise FetchError("Availability response is not JSON", url=query.url, cause=exc) from exc
        return data
