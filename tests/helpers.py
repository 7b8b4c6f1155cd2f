"""Fakes and payload builders shared by the test modules."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from apple_pickup_watcher.exceptions import ChannelError
from apple_pickup_watcher.models import Query

PART = "MQAU2LL/A"


def make_store(
    address: str,
    distance: float,
    display: Optional[str] = "available",
    part: str = PART,
    name: str = "",
) -> Dict[str, Any]:
    store: Dict[str, Any] = {
        "storeName": name or address,
        "address": {"address": address},
        "storeDistanceWithUnit": f"{distance} mi",
        "storedistance": distance,
        "partsAvailability": {},
    }
    if display is not None:
        store["partsAvailability"][part] = {"pickupDisplay": display}
    return store


def make_response(*stores: Dict[str, Any]) -> Dict[str, Any]:
    return {"head": {"status": "200"}, "body": {"stores": list(stores)}}


class FakeClient:
    """Return queued responses, raising any queued exception instead."""

    def __init__(self, responses: List[Any]) -> None:
        self.responses = list(responses)
        self.calls = 0

    def fetch(self, query: Query) -> Any:
        self.calls += 1
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class RecordingChannel:
    def __init__(self, name: str = "recording", fail: bool = False) -> None:
        self.name = name
        self.fail = fail
        self.sent: List[str] = []

    def send(self, summary: str) -> None:
        if self.fail:
            raise ChannelError("boom", channel=self.name)
        self.sent.append(summary)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
