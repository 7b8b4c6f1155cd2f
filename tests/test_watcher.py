import io
import logging

import pytest

from apple_pickup_watcher.exceptions import FetchError, MalformedResponseError
from apple_pickup_watcher.models import Query, WatchStatus
from apple_pickup_watcher.notifier import Notifier
from apple_pickup_watcher.watcher import StatusLine, StockWatcher

from helpers import FakeClient, FakeClock, RecordingChannel, make_response, make_store


def _watcher(query, responses, clock, strict=False):
    channel = RecordingChannel()
    client = FakeClient(responses)
    status_stream = io.StringIO()
    watcher = StockWatcher(
        query,
        client,  # type: ignore[arg-type]
        Notifier([channel]),
        status_line=StatusLine(status_stream),
        strict=strict,
        sleep=clock.sleep,
        clock=clock,
    )
    return watcher, client, channel, status_stream


def test_empty_result_waits_one_interval_then_retries(query: Query, clock: FakeClock) -> None:
    responses = [make_response(make_store("far", 90)), make_response(make_store("A", 5))]
    watcher, client, channel, _ = _watcher(query, responses, clock)

    stores = watcher.run()

    assert [s.address for s in stores] == ["A"]
    assert client.calls == 2
    assert sum(clock.sleeps) == pytest.approx(query.poll_interval)
    assert all(s <= 1.0 for s in clock.sleeps)
    assert watcher.state.requests_made == 2
    assert len(channel.sent) == 1


def test_found_on_first_tick_notifies_once_and_stops(query: Query, clock: FakeClock) -> None:
    responses = [make_response(make_store("A", 5), make_store("B", 70))]
    watcher, client, channel, _ = _watcher(query, responses, clock)

    watcher.run()

    assert client.calls == 1
    assert clock.sleeps == []
    assert watcher.status is WatchStatus.DONE
    assert channel.sent == ["The device is currently available at 1 stores near you:\nA which is 5 mi away"]


def test_fetch_error_counts_as_empty_cycle(query: Query, clock: FakeClock) -> None:
    responses = [FetchError("down"), FetchError("down"), make_response(make_store("A", 5))]
    watcher, client, channel, _ = _watcher(query, responses, clock)

    watcher.run()

    assert client.calls == 3
    assert watcher.state.fetch_errors == 2
    assert watcher.state.requests_made == 3
    assert sum(clock.sleeps) == pytest.approx(2 * query.poll_interval)
    assert len(channel.sent) == 1


def test_malformed_response_is_counted_separately(query: Query, clock: FakeClock) -> None:
    responses = [{"unexpected": True}, make_response(make_store("A", 5))]
    watcher, client, _, _ = _watcher(query, responses, clock)

    watcher.run()

    assert watcher.state.malformed_responses == 1
    assert watcher.state.fetch_errors == 0
    assert client.calls == 2


def test_strict_mode_raises_on_malformed_response(query: Query, clock: FakeClock) -> None:
    watcher, _, channel, _ = _watcher(query, [{"body": {}}], clock, strict=True)

    with pytest.raises(MalformedResponseError):
        watcher.run()
    assert channel.sent == []


def test_tick_records_request_time(query: Query, clock: FakeClock) -> None:
    watcher, _, _, _ = _watcher(query, [make_response()], clock)

    assert watcher.tick() == []
    assert watcher.state.last_request_timestamp == clock.now
    assert watcher.status is WatchStatus.WAITING_FOR_STOCK


def test_status_line_shows_seconds_since_last_request(query: Query, clock: FakeClock) -> None:
    watcher, _, _, stream = _watcher(query, [make_response()], clock)
    watcher.tick()

    watcher.wait(3)

    output = stream.getvalue()
    assert "Last request made 0 seconds ago" in output
    assert "Last request made 2 seconds ago" in output
    assert watcher.state.requests_made == 1


def test_status_line_is_silent_before_first_request(query: Query, clock: FakeClock) -> None:
    stream = io.StringIO()
    status_line = StatusLine(stream)
    watcher, _, _, _ = _watcher(query, [], clock)

    status_line.render(watcher.state, clock())
    status_line.clear()

    assert stream.getvalue() == ""


def test_success_log_lists_stores_and_elapsed_time(
    query: Query, clock: FakeClock, caplog: pytest.LogCaptureFixture
) -> None:
    responses = [make_response(), make_response(make_store("A", 5, name="Fifth Avenue"))]
    watcher, _, _, _ = _watcher(query, responses, clock)

    with caplog.at_level(logging.INFO, logger="apple_pickup_watcher.watcher"):
        watcher.run()

    assert "Available at Fifth Avenue: A which is 5 mi away" in caplog.text
    assert "in 30s" in caplog.text
