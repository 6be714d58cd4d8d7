"""Pytest configuration to make the project root importable.

``src`` and ``pages`` are plain directories at the repository root, the same
way the streamlit app imports them, so the root has to be on ``sys.path``.
"""

import os
import sys

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture
def raw_operation() -> dict:
    """A complete upstream operation as returned by /operations/{address}."""
    return {
        "operationId": "0xabc:0",
        "asset": "btc",
        "state": "done",
        "sourceChain": "bitcoin",
        "destinationChain": "hyperliquid",
        "sourceAddress": "bc1qsource",
        "destinationAddress": "0xdest",
        "protocolAddress": "bc1qprotocol",
        "sourceTxHash": "0xsrctx",
        "destinationTxHash": "0xdsttx",
        "sourceAmount": "150000000",
        "destinationFeeAmount": "1000",
        "sweepFeeAmount": "2500",
        "opCreatedAt": "2024-03-01T12:00:00Z",
        "broadcastAt": "2024-03-01T12:05:00Z",
    }
