from __future__ import annotations

import pytest

from apple_pickup_watcher.models import Carrier, Query

from helpers import PART, FakeClock


@pytest.fixture
def query() -> Query:
    return Query(
        endpoint="https://www.apple.com/shop/retail/pickup-message",
        carrier=Carrier.TMOBILE,
        zip_code="10001",
        part_number=PART,
        max_distance=60,
        poll_interval=30,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
