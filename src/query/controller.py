import json
import logging
from enum import Enum
from logging import Logger
from typing import Callable

from src.bridge.operations import OperationsResponse
from src.bridge.unit_bridge_api import RelayResponse, relay_operations
from src.query.selection import QuerySelection

Fetcher = Callable[[QuerySelection], RelayResponse]


class QueryStatus(str, Enum):
    IDLE = 'idle'
    LOADING = 'loading'
    SUCCESS = 'success'
    ERROR = 'error'


def default_fetcher(selection: QuerySelection) -> RelayResponse:
    return relay_operations(selection.address, selection.network)


def error_message(response: RelayResponse) -> str:
    """
    prefers the body's error field, then the http status
    """
    try:
        body = json.loads(response.body)
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get('error'):
        return str(body['error'])
    return f'HTTP {response.status_code}'


class QueryController:
    """
    fetch-on-demand with loading / success / error state.

    every query gets a request id and only the latest one may commit,
    so a slow earlier response can never overwrite a newer query
    """

    def __init__(self, fetcher: Fetcher = default_fetcher, logger: Logger | None = None):
        self._fetcher = fetcher
        self._logger = logger or logging.getLogger(__name__)
        self._latest_request_id = 0
        self._initial_query_done = False

        self.status = QueryStatus.IDLE
        self.data: OperationsResponse | None = None
        self.error = ''
        self.selection: QuerySelection | None = None

    @property
    def loading(self) -> bool:
        return self.status == QueryStatus.LOADING

    @property
    def show_empty_state(self) -> bool:
        return (
            self.status == QueryStatus.SUCCESS
            and not self.error
            and self.data is not None
            and len(self.data.operations) == 0
        )

    def is_latest(self, request_id: int) -> bool:
        return request_id == self._latest_request_id

    def start(self, selection: QuerySelection) -> int | None:
        if not selection.address.strip():
            return None

        self._latest_request_id += 1
        self.selection = selection
        self.status = QueryStatus.LOADING
        # drop previous results straight away so nothing stale shows while loading
        self.data = None
        self.error = ''
        return self._latest_request_id

    def complete(self, request_id: int, response: RelayResponse) -> bool:
        if not self._accept(request_id):
            return False

        if not response.ok:
            self._set_error(error_message(response))
            return True

        try:
            body = json.loads(response.body)
        except ValueError as e:
            self._set_error(str(e))
            return True
        if not isinstance(body, dict):
            self._set_error(f'unexpected response body: {type(body).__name__}')
            return True

        self.data = OperationsResponse.from_dict(body)
        self.error = ''
        self.status = QueryStatus.SUCCESS
        self._logger.info(
            f'loaded {len(self.data.operations)} operations for {self.selection.address}')
        return True

    def fail(self, request_id: int, exc: BaseException) -> bool:
        if not self._accept(request_id):
            return False
        self._set_error(str(exc) or type(exc).__name__)
        return True

    def run(self, selection: QuerySelection) -> int | None:
        request_id = self.start(selection)
        if request_id is None:
            return None
        try:
            response = self._fetcher(selection)
        except Exception as e:
            self._logger.error(f'error fetching operations for {selection.address}: {e}')
            self.fail(request_id, e)
        else:
            self.complete(request_id, response)
        return request_id

    def run_initial(self, selection: QuerySelection) -> int | None:
        """
        the automatic query for an address that came in via the url, fires at most once
        """
        if self._initial_query_done:
            return None
        self._initial_query_done = True
        if not selection.address:
            return None
        return self.run(selection)

    def _accept(self, request_id: int) -> bool:
        if self.is_latest(request_id):
            return True
        self._logger.info(
            f'discarding stale response for request {request_id}, latest is {self._latest_request_id}')
        return False

    def _set_error(self, message: str):
        self._logger.warning(f'operations query failed: {message}')
        self.data = None
        self.error = message
        self.status = QueryStatus.ERROR
