import json

import pytest

from src.bridge.unit_bridge_api import RelayResponse
from src.query.controller import QueryController, QueryStatus, error_message
from src.query.selection import QuerySelection


def _ok(body) -> RelayResponse:
    return RelayResponse(200, json.dumps(body), {"content-type": "application/json"})


class _RecordingFetcher:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def __call__(self, selection: QuerySelection) -> RelayResponse:
        self.calls.append(selection)
        if self.exc is not None:
            raise self.exc
        return self.response


def test_empty_address_is_a_noop() -> None:
    fetcher = _RecordingFetcher(_ok({"operations": []}))
    controller = QueryController(fetcher)

    assert controller.run(QuerySelection("  ", "mainnet")) is None
    assert fetcher.calls == []
    assert controller.status == QueryStatus.IDLE
    assert controller.error == ""


def test_success_holds_parsed_response(raw_operation) -> None:
    controller = QueryController(_RecordingFetcher(_ok({"operations": [raw_operation], "addresses": []})))

    controller.run(QuerySelection("0xabc"))

    assert controller.status == QueryStatus.SUCCESS
    assert controller.error == ""
    assert len(controller.data.operations) == 1
    assert not controller.show_empty_state


def test_zero_operations_shows_empty_state() -> None:
    controller = QueryController(_RecordingFetcher(_ok({"operations": []})))

    controller.run(QuerySelection("0xabc"))

    assert controller.show_empty_state
    assert controller.error == ""


def test_start_clears_previous_results_immediately(raw_operation) -> None:
    controller = QueryController(_RecordingFetcher(_ok({"operations": [raw_operation]})))
    controller.run(QuerySelection("0xabc"))

    controller.start(QuerySelection("0xdef"))

    assert controller.loading
    assert controller.data is None
    assert controller.error == ""


@pytest.mark.parametrize(
    "response,expected",
    [
        (RelayResponse(404, json.dumps({"error": "address not found"})), "address not found"),
        (RelayResponse(502, "<html>bad gateway</html>"), "HTTP 502"),
        (RelayResponse(500, json.dumps({"error": ""})), "HTTP 500"),
        (RelayResponse(400, json.dumps({"error": "address is required"})), "address is required"),
    ],
)
def test_error_message_preference(response, expected) -> None:
    assert error_message(response) == expected

    controller = QueryController(_RecordingFetcher(response))
    controller.run(QuerySelection("0xabc"))

    assert controller.status == QueryStatus.ERROR
    assert controller.error == expected
    assert controller.data is None
    assert not controller.show_empty_state


def test_transport_failure_uses_exception_text() -> None:
    controller = QueryController(_RecordingFetcher(exc=ConnectionError("connection reset")))

    controller.run(QuerySelection("0xabc"))

    assert controller.status == QueryStatus.ERROR
    assert controller.error == "connection reset"


def test_malformed_success_body_is_an_error() -> None:
    controller = QueryController(_RecordingFetcher(RelayResponse(200, "not json")))
    controller.run(QuerySelection("0xabc"))
    assert controller.status == QueryStatus.ERROR
    assert controller.error

    controller = QueryController(_RecordingFetcher(_ok([1, 2, 3])))
    controller.run(QuerySelection("0xabc"))
    assert controller.status == QueryStatus.ERROR
    assert controller.data is None


def test_stale_response_never_overwrites_newer_query(raw_operation) -> None:
    controller = QueryController()

    first = controller.start(QuerySelection("0xfirst"))
    second = controller.start(QuerySelection("0xsecond"))

    assert controller.complete(second, _ok({"operations": []}))
    assert not controller.complete(first, _ok({"operations": [raw_operation]}))
    assert not controller.fail(first, RuntimeError("late failure"))

    assert controller.status == QueryStatus.SUCCESS
    assert controller.data.operations == ()
    assert controller.error == ""
    assert controller.selection.address == "0xsecond"


def test_initial_query_fires_once_and_only_with_address() -> None:
    fetcher = _RecordingFetcher(_ok({"operations": []}))
    controller = QueryController(fetcher)

    assert controller.run_initial(QuerySelection("0xabc")) is not None
    assert controller.run_initial(QuerySelection("0xabc")) is None
    assert len(fetcher.calls) == 1

    other = QueryController(fetcher)
    assert other.run_initial(QuerySelection("")) is None
    assert other.run_initial(QuerySelection("0xabc")) is None
    assert len(fetcher.calls) == 1
