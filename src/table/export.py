import csv
from datetime import datetime, timezone
from typing import Iterable, Sequence

from src.bridge.operations import OperationRecord
from src.table.columns import COLUMNS, ColumnSpec
from src.table.projection import project_table

EXPORT_TIMESTAMP_FORMAT = '%Y%m%d-%H%M%S'


def to_delimited_text(
    ordered_records: Iterable[OperationRecord],
    column_specs: Sequence[ColumnSpec] = COLUMNS,
) -> str:
    """
    csv export of exactly what the table shows, in the same row order.
    cells with commas, quotes or newlines are quoted with inner quotes doubled,
    everything else is written bare
    """
    df = project_table(ordered_records, column_specs)
    return df.to_csv(
        index=False,
        quoting=csv.QUOTE_MINIMAL,
        lineterminator='\r\n',
    )


def export_filename(address: str, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    prefix = f'unit-operations-{address[:10]}' if address else 'unit-operations'
    return f'{prefix}-{now.strftime(EXPORT_TIMESTAMP_FORMAT)}.csv'
