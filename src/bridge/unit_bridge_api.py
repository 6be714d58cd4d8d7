import json
import logging
import os
from dataclasses import dataclass, field
from typing import Callable
from urllib.parse import quote

import requests
from dotenv import load_dotenv

from src.bridge.errors import UnitBridgeError, UnitBridgeStatusError
from src.consts import (
    DEFAULT_NETWORK,
    RELAY_CACHE_CONTROL,
    UNIT_API_MAINNET_URL,
    UNIT_API_TESTNET_URL,
)

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15


def pick_base_url(network: str | None) -> str:
    """
    UNIT_API_BASE overrides both networks, otherwise anything
    other than testnet resolves to mainnet
    """
    env_base = os.getenv('UNIT_API_BASE')
    if env_base:
        return env_base.rstrip('/')
    n = (network or DEFAULT_NETWORK).lower()
    return UNIT_API_TESTNET_URL if n == 'testnet' else UNIT_API_MAINNET_URL


@dataclass(frozen=True)
class RelayResponse:
    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def _json_error(status_code: int, message: str) -> RelayResponse:
    return RelayResponse(
        status_code=status_code,
        body=json.dumps({'error': message}),
        headers={'content-type': 'application/json'},
    )


class UnitBridgeInfo():
    def __init__(self, network: str = DEFAULT_NETWORK, timeout: float | None = None):
        self.network = network
        self.base_url = pick_base_url(network)
        self.timeout = timeout if timeout is not None else float(
            os.getenv('UNIT_API_TIMEOUT_SECONDS', DEFAULT_TIMEOUT_SECONDS))

        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
        })
        self._logger = logging.getLogger(__name__)

    def fetch_operations(self, address: str) -> requests.Response:
        """
        raw upstream response for an address, status is not checked
        """
        url = f'{self.base_url}/operations/{quote(address, safe="")}'
        self._logger.info(f'fetching {self.network} operations for {address}')
        return self.session.get(url, timeout=self.timeout)

    def get_operations(self, address: str) -> dict:
        """
        parsed operations payload for an address,
        raises UnitBridgeError on transport failure or non-2xx status
        """
        try:
            response = self.fetch_operations(address)
        except requests.RequestException as e:
            raise UnitBridgeError(f'request failed for {address}: {e}') from e
        self._handle_exception(response)
        try:
            return response.json()
        except ValueError as e:
            raise UnitBridgeError(f'malformed response for {address}: {e}') from e

    def passthrough(self, address: str) -> RelayResponse:
        """
        upstream status code and body unchanged, with short-lived cache hints.
        transport errors propagate so callers can keep them out of any cache
        """
        response = self.fetch_operations(address)
        return RelayResponse(
            status_code=response.status_code,
            body=response.text,
            headers={
                'content-type': response.headers.get('content-type') or 'application/json',
                'cache-control': RELAY_CACHE_CONTROL,
            },
        )

    def relay(self, address: str | None) -> RelayResponse:
        return relay_with(address, self.passthrough)

    def _handle_exception(self, response: requests.Response):
        status_code = response.status_code
        if status_code < 400:
            return
        try:
            err = response.json()
        except ValueError:
            raise UnitBridgeStatusError(status_code, response.text)
        if isinstance(err, dict) and err.get('error'):
            raise UnitBridgeStatusError(status_code, str(err['error']))
        raise UnitBridgeStatusError(status_code, response.text)


def relay_operations(address: str | None, network: str | None = None) -> RelayResponse:
    return UnitBridgeInfo(network or DEFAULT_NETWORK).relay(address)


def relay_with(address: str | None, passthrough: Callable[[str], RelayResponse]) -> RelayResponse:
    """
    400 without an address, 500 with the exception text if the upstream
    can't be reached; error responses carry no cache hints
    """
    if not address:
        return _json_error(400, 'address is required')
    try:
        return passthrough(address)
    except Exception as e:
        logger.error(f'error relaying operations for {address}: {e}')
        return _json_error(500, str(e))
