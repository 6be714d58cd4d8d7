import logging
from typing import Callable, Iterable, Sequence

import pandas as pd

from src.bridge.operations import OperationRecord, parse_timestamp
from src.consts import ASSET_PLACEHOLDER, PLACEHOLDER
from src.table.columns import COLUMNS, ColumnSpec
from src.utils.amount_utils import human_amount

logger = logging.getLogger(__name__)

LOCAL_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def format_local_time(value: str | None) -> str:
    ts = parse_timestamp(value)
    if ts is None:
        return ''
    try:
        # astimezone() with no argument converts to the viewer's local timezone
        return ts.to_pydatetime(warn=False).astimezone().strftime(LOCAL_DATE_FORMAT)
    except (OverflowError, ValueError):
        # shifting near year 1 or 9999 can leave the datetime range
        return ''


def asset_label(record: OperationRecord) -> str:
    return record.asset.upper() if record.asset else ASSET_PLACEHOLDER


def _with_ticker(amount: str, record: OperationRecord) -> str:
    return ' '.join(p for p in (amount, record.asset.upper()) if p)


def format_amount(record: OperationRecord) -> str:
    return _with_ticker(human_amount(record.asset, record.source_amount), record)


def format_fee(record: OperationRecord) -> str:
    """
    destination fee is in base units like the amount,
    sweep fee is reported in its own units and is shown raw
    """
    fee = PLACEHOLDER
    if record.destination_fee_amount:
        fee = _with_ticker(
            human_amount(record.asset, record.destination_fee_amount), record)
    if record.sweep_fee_amount:
        return f'{fee} + sweep {record.sweep_fee_amount}'
    return fee


def _or_placeholder(value: str | None) -> str:
    return value if value else PLACEHOLDER


_PROJECTIONS: dict[str, Callable[[OperationRecord], str]] = {
    'time': lambda r: format_local_time(r.op_created_at),
    'asset': asset_label,
    'route': lambda r: f'{_or_placeholder(r.source_chain)} → {_or_placeholder(r.destination_chain)}',
    'state': lambda r: _or_placeholder(r.state),
    'amount': format_amount,
    'fee': format_fee,
    'sourceAddress': lambda r: _or_placeholder(r.source_address),
    'destinationAddress': lambda r: _or_placeholder(r.destination_address),
    'protocolAddress': lambda r: _or_placeholder(r.protocol_address),
    'sourceTxHash': lambda r: _or_placeholder(r.source_tx_hash),
    'destinationTxHash': lambda r: _or_placeholder(r.destination_tx_hash),
}


def project_row(record: OperationRecord, column_key: str) -> str:
    """
    plain-text cell value shared by the table and the csv export
    """
    projection = _PROJECTIONS.get(column_key)
    if projection is None:
        logger.warning(f'no projection for column {column_key}, using placeholder')
        return PLACEHOLDER
    return projection(record)


def project_table(
    records: Iterable[OperationRecord],
    columns: Sequence[ColumnSpec] = COLUMNS,
) -> pd.DataFrame:
    """
    one row per record, column labels as headers, all values plain strings
    """
    rows = [
        [project_row(record, c.key) for c in columns]
        for record in records
    ]
    return pd.DataFrame(rows, columns=[c.label for c in columns], dtype=object)
