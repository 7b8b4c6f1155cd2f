"""Domain models used by the application."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from .exceptions import ConfigurationError, MalformedResponseError

AVAILABLE = "available"


class Carrier(str, Enum):
    ATT = "ATT"
    SPRINT = "SPRINT"
    TMOBILE = "TMOBILE"
    VERIZON = "VERIZON"

    @classmethod
    def parse(cls, value: str) -> "Carrier":
        try:
            return cls(value.strip().upper())
        except ValueError:
            choices = ", ".join(c.value for c in cls)
            raise ConfigurationError(f"Unknown carrier {value!r}; expected one of {choices}") from None


class WatchStatus(Enum):
    WAITING_FOR_STOCK = "waiting_for_stock"
    DONE = "done"


@dataclass(frozen=True)
class Query:
    """Everything one watch run needs to build its request."""

    endpoint: str
    carrier: Carrier
    zip_code: str
    part_number: str
    max_distance: Optional[float] = None
    poll_interval: float = 30.0

    def __post_init__(self) -> None:
        if not self.zip_code or not str(self.zip_code).strip():
            raise ConfigurationError("A zip code is required")
        if not self.part_number:
            raise ConfigurationError("A part number is required")
        if not math.isfinite(self.poll_interval) or self.poll_interval <= 0:
            raise ConfigurationError(f"Poll interval must be a positive number, got {self.poll_interval}")
        if self.max_distance is not None and (not math.isfinite(self.max_distance) or self.max_distance < 0):
            raise ConfigurationError(f"Distance must be a non-negative number, got {self.max_distance}")

    @property
    def params(self) -> Dict[str, str]:
        return {
            "pl": "true",
            "cppart": f"{self.carrier.value}/US",
            "parts.0": self.part_number,
            "location": self.zip_code,
        }

    @property
    def url(self) -> str:
        return f"{self.endpoint}?{urlencode(self.params)}"


@dataclass
class StoreRecord:
    address: str
    distance_with_unit: str
    distance_value: float
    part_availability: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    store_name: str = ""

    @classmethod
    def from_payload(cls, raw: Mapping[str, Any]) -> "StoreRecord":
        try:
            address = raw["address"]["address"]
            distance_with_unit = raw["storeDistanceWithUnit"]
        except (KeyError, TypeError) as exc:
            raise MalformedResponseError(f"Store entry is missing {exc}") from exc
        try:
            distance_value = float(raw["storedistance"])
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedResponseError(
                f"Store distance is not numeric: {raw.get('storedistance')!r}"
            ) from exc
        return cls(
            address=str(address),
            distance_with_unit=str(distance_with_unit),
            distance_value=distance_value,
            part_availability=raw.get("partsAvailability") or {},
            store_name=str(raw.get("storeName", "")),
        )

    def summary_line(self) -> str:
        return f"{self.address} which is {self.distance_with_unit} away"

    def __str__(self) -> str:
        name = f"{self.store_name}: " if self.store_name else ""
        return f"{name}{self.summary_line()}"


@dataclass
class PollState:
    """Counters for a single watch run, owned by the scheduler."""

    last_request_timestamp: Optional[float] = None
    requests_made: int = 0
    fetch_errors: int = 0
    malformed_responses: int = 0
    started_at: float = field(default_factory=time.monotonic)

    def record_request(self, now: float) -> None:
        self.last_request_timestamp = now
        self.requests_made += 1

    def seconds_since_last_request(self, now: float) -> Optional[int]:
        if self.last_request_timestamp is None:
            return None
        return int(now - self.last_request_timestamp)

    def elapsed(self, now: float) -> float:
        return now - self.started_at
