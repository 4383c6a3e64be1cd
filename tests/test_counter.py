"""Behaviour of CounterClient against a fake device."""
import pytest
import requests

from counter_core.errors import (
    ConfirmationError,
    OperationInProgressError,
    ProtocolError,
    TransportError,
)
from counter_core.states import OperationPhase
from counter_devices import CounterClient

from .utilities import ADDRESS


def test_initial_state(client):
    state = client.state
    assert state.address == ADDRESS
    assert state.value is None
    assert state.status == "Idle"
    assert state.phase is OperationPhase.IDLE
    assert state.error is None


def test_refresh_reads_count(client, device):
    device.count = 5

    state = client.refresh()

    assert state.value == "5"
    assert state.status == "Updated"
    assert state.ok
    assert client.value == "5"
    assert device.paths == ["/count"]


def test_refresh_keeps_raw_text(client, device):
    device.count_body = "not a number"

    state = client.refresh()

    assert state.ok
    assert state.value == "not a number"
    with pytest.raises(ProtocolError):
        state.count


def test_refresh_unreachable_keeps_value(client, device):
    device.count = 3
    client.refresh()
    device.failures["/count"] = requests.ConnectionError("Connection refused")

    state = client.refresh()

    assert state.value == "3"
    assert state.phase is OperationPhase.FAILED
    assert state.status == "Error: Connection refused"
    assert isinstance(state.error, TransportError)


def test_refresh_timeout_reports_reason(client, device):
    device.failures["/count"] = requests.Timeout("Read timed out")

    state = client.refresh()

    assert state.value is None
    assert state.status == "Error: Read timed out"


def test_refresh_http_error_reports_status_text(client, device):
    device.failures["/count"] = 404

    state = client.refresh()

    assert state.status == "Error: 404 Not Found"
    assert state.error.status_code == 404


def test_repeated_refresh_is_stable(client, device):
    device.count = 7

    values = [client.refresh().value for _ in range(3)]

    assert values == ["7", "7", "7"]


def test_refresh_uses_given_address(client, device):
    client.refresh("10.0.0.9:8080")

    assert client.address == "10.0.0.9:8080"
    assert device.calls[0][1] == "10.0.0.9:8080"


def test_increment_confirms_with_refresh(client, device):
    device.count = 4

    state = client.increment()

    assert state.value == "5"
    assert state.status == "Incremented"
    assert state.ok
    assert device.paths == ["/add", "/count"]


def test_increment_ignores_mutation_reply(client, device):
    device.count_body = "41"

    state = client.increment()

    # The device says "Added. New count: 1" but /count is authoritative.
    assert state.value == "41"


def test_increment_unconfirmed_keeps_value(client, device):
    device.count = 2
    client.refresh()
    device.failures["/count"] = 503

    state = client.increment()

    assert device.count == 3
    assert state.value == "2"
    assert state.phase is OperationPhase.FAILED
    assert state.status == "Error: Incremented on device but refresh failed: 503 Service Unavailable"
    assert isinstance(state.error, ConfirmationError)
    assert isinstance(state.error.cause, TransportError)
    assert state.error.cause.status_code == 503


def test_increment_failure_skips_refresh(client, device):
    device.failures["/add"] = requests.ConnectionError("Connection reset by peer")

    state = client.increment()

    assert state.status == "Error: Connection reset by peer"
    assert state.value is None
    assert device.paths == ["/add"]


def test_decrement_confirms_with_refresh(client, device):
    device.count = 1

    state = client.decrement()

    assert state.value == "0"
    assert state.status == "Decremented"
    assert device.paths == ["/sub", "/count"]


def test_decrement_does_not_clamp(client, device):
    state = client.decrement()

    assert state.value == "-1"
    assert state.count == -1


def test_decrement_server_error_skips_refresh(client, device):
    device.count = 6
    client.refresh()
    device.failures["/sub"] = 500

    state = client.decrement()

    assert state.value == "6"
    assert state.status == "Error: 500 Internal Server Error"
    assert device.paths == ["/count", "/sub"]


def test_failure_does_not_block_next_call(client, device):
    device.failures["/count"] = 500
    assert not client.refresh().ok

    del device.failures["/count"]
    state = client.refresh()

    assert state.ok
    assert state.error is None


def test_empty_address_fails_without_request(http, device):
    client = CounterClient("", http=http)

    state = client.refresh()

    assert state.phase is OperationPhase.FAILED
    assert state.status.startswith("Error: ")
    assert device.calls == []


def test_listeners_see_every_transition(client, device):
    seen = []
    unsubscribe = client.subscribe(lambda state: seen.append((state.status, state.phase)))

    client.increment()

    assert seen == [
        ("Incrementing...", OperationPhase.IN_FLIGHT),
        ("Fetching...", OperationPhase.IN_FLIGHT),
        ("Incremented", OperationPhase.SUCCEEDED),
    ]

    unsubscribe()
    client.refresh()
    assert len(seen) == 3


def test_refresh_transitions(client, device):
    seen = []
    client.subscribe(lambda state: seen.append((state.status, state.phase)))

    client.refresh()

    assert seen == [
        ("Fetching...", OperationPhase.IN_FLIGHT),
        ("Updated", OperationPhase.SUCCEEDED),
    ]


@pytest.mark.parametrize("operation, pending, done", [
    ("increment", "Incrementing...", "Incremented"),
    ("decrement", "Decrementing...", "Decremented"),
])
def test_unconfirmed_mutation_settles_once(client, device, operation, pending, done):
    device.failures["/count"] = 503
    seen = []
    client.subscribe(seen.append)

    state = getattr(client, operation)()

    assert [(s.status, s.phase) for s in seen] == [
        (pending, OperationPhase.IN_FLIGHT),
        ("Fetching...", OperationPhase.IN_FLIGHT),
        (f"Error: {done} on device but refresh failed: 503 Service Unavailable", OperationPhase.FAILED),
    ]
    assert all(s.busy for s in seen[:-1])
    assert seen[-1] == state
    assert isinstance(state.error, ConfirmationError)
    assert state.value is None
    assert device.paths == ["/add" if operation == "increment" else "/sub", "/count"]


def test_decrement_unconfirmed_keeps_value(client, device):
    device.count = 4
    client.refresh()
    device.failures["/count"] = 503

    state = client.decrement()

    assert device.count == 3
    assert state.value == "4"
    assert state.status == "Error: Decremented on device but refresh failed: 503 Service Unavailable"
    assert state.error.cause.status_code == 503


def test_failing_listener_does_not_break_operation(client, device):
    def broken(state):
        raise RuntimeError("boom")

    client.subscribe(broken)
    device.count = 8

    assert client.refresh().value == "8"


def test_unguarded_calls_may_overlap(client, device):
    nested = []

    def reenter(state):
        if state.status == "Incrementing..." and not nested:
            nested.append(client.refresh())

    client.subscribe(reenter)
    client.increment()

    assert nested[0].ok
    assert device.paths == ["/count", "/add", "/count"]


def test_guard_rejects_overlapping_call(http, device):
    client = CounterClient(ADDRESS, http=http, guard_overlapping=True)
    rejected = []

    def reenter(state):
        if state.status == "Incrementing...":
            rejected.append(client.refresh())

    client.subscribe(reenter)
    state = client.increment()

    assert state.status == "Incremented"
    assert rejected[0].phase is OperationPhase.FAILED
    assert rejected[0].status == "Error: operation already in progress"
    assert isinstance(rejected[0].error, OperationInProgressError)
    assert device.paths == ["/add", "/count"]

    # The guard is released once the call settles.
    assert client.refresh().ok


def test_scenario_refresh_then_increment(client, device):
    device.count = 0

    first = client.refresh()
    assert (first.value, first.status) == ("0", "Updated")

    second = client.increment()
    assert (second.value, second.status) == ("1", "Incremented")
