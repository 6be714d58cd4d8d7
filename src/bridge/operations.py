import logging
from datetime import datetime, timezone
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

import pandas as pd

from src.consts import (
    DEFAULT_STATE_COLOR,
    DEPOSIT_DESTINATION_CHAIN,
    STATE_COLORS,
    TERMINAL_STATES,
)

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _optional_str(value: Any) -> str | None:
    """
    upstream is trusted but not guaranteed complete,
    so null / empty / non-scalar values all count as absent
    """
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value)
    return text if text != '' else None


@dataclass(frozen=True)
class OperationRecord:
    """
    read-only view of a single unit bridge operation (deposit / withdrawal)
    """
    asset: str = ''
    state: str = ''
    source_chain: str = ''
    destination_chain: str = ''
    source_amount: str = ''
    source_address: str | None = None
    destination_address: str | None = None
    protocol_address: str | None = None
    source_tx_hash: str | None = None
    destination_tx_hash: str | None = None
    destination_fee_amount: str | None = None
    sweep_fee_amount: str | None = None
    op_created_at: str | None = None
    broadcast_at: str | None = None
    operation_id: str | None = None
    raw: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'OperationRecord':
        return cls(
            asset=(_optional_str(data.get('asset')) or '').lower(),
            state=_optional_str(data.get('state')) or '',
            source_chain=_optional_str(data.get('sourceChain')) or '',
            destination_chain=_optional_str(data.get('destinationChain')) or '',
            source_amount=_optional_str(data.get('sourceAmount')) or '',
            source_address=_optional_str(data.get('sourceAddress')),
            destination_address=_optional_str(data.get('destinationAddress')),
            protocol_address=_optional_str(data.get('protocolAddress')),
            source_tx_hash=_optional_str(data.get('sourceTxHash')),
            destination_tx_hash=_optional_str(data.get('destinationTxHash')),
            destination_fee_amount=_optional_str(data.get('destinationFeeAmount')),
            sweep_fee_amount=_optional_str(data.get('sweepFeeAmount')),
            op_created_at=_optional_str(data.get('opCreatedAt')),
            broadcast_at=_optional_str(data.get('broadcastAt')),
            operation_id=_optional_str(data.get('operationId')),
            raw=MappingProxyType(dict(data)),
        )


@dataclass(frozen=True)
class ProtocolAddress:
    source_coin_type: str = ''
    destination_chain: str = ''
    address: str = ''

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ProtocolAddress':
        return cls(
            source_coin_type=_optional_str(data.get('sourceCoinType')) or '',
            destination_chain=_optional_str(data.get('destinationChain')) or '',
            address=_optional_str(data.get('address')) or '',
        )


@dataclass(frozen=True)
class OperationsResponse:
    operations: tuple[OperationRecord, ...] = ()
    addresses: tuple[ProtocolAddress, ...] = ()

    @classmethod
    def from_dict(cls, body: Mapping[str, Any]) -> 'OperationsResponse':
        return cls(
            operations=tuple(
                OperationRecord.from_dict(op)
                for op in _objects(body.get('operations'), 'operations')),
            addresses=tuple(
                ProtocolAddress.from_dict(a)
                for a in _objects(body.get('addresses'), 'addresses')),
        )


def _objects(items: Any, name: str) -> list[Mapping[str, Any]]:
    if items is None:
        return []
    if not isinstance(items, list):
        logger.warning(f'expected a list for {name}, got {type(items).__name__}, ignoring')
        return []

    objects = []
    for item in items:
        if isinstance(item, Mapping):
            objects.append(item)
        else:
            logger.warning(f'skipping non-object entry in {name}: {item!r}')
    return objects


def parse_timestamp(value: str | None) -> pd.Timestamp | None:
    """
    parses an ISO-8601 timestamp as UTC, returns None if absent or unparseable
    """
    if not value:
        return None
    try:
        ts = pd.to_datetime(value, utc=True, errors='coerce')
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return ts


def _recency_key(record: OperationRecord) -> tuple[bool, datetime]:
    ts = parse_timestamp(record.op_created_at)
    # missing timestamps count as epoch zero and always go last
    if ts is None:
        return False, EPOCH
    # compare as datetimes, nanosecond ints overflow outside 1677-2262
    return True, ts.to_pydatetime(warn=False)


def order_by_recency(records: Iterable[OperationRecord]) -> list[OperationRecord]:
    """
    newest first by opCreatedAt; sorted() is stable with reverse=True,
    so operations from the same batch keep their upstream order
    """
    return sorted(records, key=_recency_key, reverse=True)


def state_color(state: str | None) -> str:
    return STATE_COLORS.get(state or '', DEFAULT_STATE_COLOR)


def is_terminal(state: str | None) -> bool:
    return state in TERMINAL_STATES


def operation_direction(record: OperationRecord) -> str:
    return 'Deposit' if record.destination_chain == DEPOSIT_DESTINATION_CHAIN else 'Withdraw'
