"""Store availability filtering."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from .exceptions import MalformedResponseError
from .models import AVAILABLE, Query, StoreRecord

logger = logging.getLogger(__name__)


def extract_stores(response: Any) -> List[Dict[str, Any]]:
    """Return the raw store list from a pickup-message response."""
    if not isinstance(response, Mapping):
        raise MalformedResponseError(f"Expected a JSON object, got {type(response).__name__}")
    body = response.get("body")
    if not isinstance(body, Mapping):
        raise MalformedResponseError("Response has no 'body' object")
    stores = body.get("stores")
    if stores is None:
        raise MalformedResponseError("Response body has no 'stores' list")
    if not isinstance(stores, list):
        raise MalformedResponseError(f"'stores' is a {type(stores).__name__}, expected a list")
    return stores


def _is_available(raw_store: Mapping[str, Any], part_number: str) -> bool:
    parts = raw_store.get("partsAvailability") or {}
    entry = parts.get(part_number) if isinstance(parts, Mapping) else None
    if not isinstance(entry, Mapping):
        return False
    return entry.get("pickupDisplay") == AVAILABLE


def _within_distance(raw_store: Mapping[str, Any], max_distance: float) -> bool:
    distance = raw_store.get("storedistance")
    try:
        return float(distance) < max_distance
    except (TypeError, ValueError) as exc:
        raise MalformedResponseError(f"Store distance is not numeric: {distance!r}") from exc


def filter_available_stores(response: Any, query: Query) -> List[StoreRecord]:
    """Select the stores that have ``query.part_number`` ready for pickup.

    Stores that do not track the part are skipped. When ``query.max_distance``
    is set the store must be strictly closer than it. Response order is kept.
    """
    matches: List[StoreRecord] = []
    for raw_store in extract_stores(response):
        if not isinstance(raw_store, Mapping):
            raise MalformedResponseError(f"Store entry is a {type(raw_store).__name__}, expected an object")
        if not _is_available(raw_store, query.part_number):
            continue
        if query.max_distance is not None and not _within_distance(raw_store, query.max_distance):
            continue
        matches.append(StoreRecord.from_payload(raw_store))
    logger.debug("%s stores have %s available", len(matches), query.part_number)
    return matches
