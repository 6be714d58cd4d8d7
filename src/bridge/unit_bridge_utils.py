from typing import Iterable

import pandas as pd

from src.bridge.operations import OperationRecord, operation_direction, parse_timestamp
from src.consts import ASSET_PLACEHOLDER, PLACEHOLDER
from src.utils.amount_utils import parse_base_units, human_amount

SUMMARY_COLUMNS = [
    'Asset',
    'Deposits',
    'Deposit Volume',
    'Withdrawals',
    'Withdraw Volume',
    'Total Operations',
    'First Operation',
    'Last Operation',
]


def operations_to_df(records: Iterable[OperationRecord]) -> pd.DataFrame:
    """
    flattens records into a df with exact integer base-unit amounts
    (python ints in an object column, never floats)
    """
    rows = []
    for r in records:
        rows.append({
            'asset': r.asset,
            'state': r.state,
            'direction': operation_direction(r),
            # unparseable amounts count as zero volume but still count as an operation
            'amount_raw': parse_base_units(r.source_amount) or 0,
            'opCreatedAt': parse_timestamp(r.op_created_at),
        })
    # object dtype everywhere so amounts beyond int64 are never coerced
    df = pd.DataFrame(
        rows, columns=['asset', 'state', 'direction', 'amount_raw', 'opCreatedAt'], dtype=object)
    df['opCreatedAt'] = pd.to_datetime(df['opCreatedAt'], utc=True)
    return df


def summarize_operations(records: Iterable[OperationRecord]) -> pd.DataFrame | None:
    """
    bridge activity summary by asset, sorted by number of operations
    """
    df = operations_to_df(records)
    if df.empty:
        return None

    result_data = []
    for asset, group in df.groupby('asset', sort=True):
        deposits = group[group['direction'] == 'Deposit']
        withdrawals = group[group['direction'] == 'Withdraw']
        dates = group['opCreatedAt'].dropna()

        result_data.append({
            'Asset': asset.upper() if asset else ASSET_PLACEHOLDER,
            'Deposits': len(deposits),
            # summing python ints keeps 18-decimal amounts exact
            'Deposit Volume': human_amount(asset, str(sum(deposits['amount_raw'], 0))),
            'Withdrawals': len(withdrawals),
            'Withdraw Volume': human_amount(asset, str(sum(withdrawals['amount_raw'], 0))),
            'Total Operations': len(group),
            'First Operation': dates.min() if not dates.empty else pd.NaT,
            'Last Operation': dates.max() if not dates.empty else pd.NaT,
        })

    return pd.DataFrame(result_data, columns=SUMMARY_COLUMNS).sort_values(
        'Total Operations', ascending=False, kind='stable').reset_index(drop=True)


def count_by_state(records: Iterable[OperationRecord]) -> pd.DataFrame:
    df = operations_to_df(records)
    df['state'] = df['state'].replace('', PLACEHOLDER)
    counts = df.groupby('state').size().reset_index(name='Operations')
    return counts.rename(columns={'state': 'State'})
