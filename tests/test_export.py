import csv
import io
from datetime import datetime, timezone

from src.bridge.operations import OperationRecord, order_by_recency
from src.table.columns import COLUMNS
from src.table.export import export_filename, to_delimited_text
from src.table.projection import project_table


def _parse(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


def test_header_row_is_column_labels() -> None:
    rows = _parse(to_delimited_text([]))
    assert rows == [[c.label for c in COLUMNS]]


def test_commas_survive_a_round_trip() -> None:
    record = OperationRecord.from_dict({
        "asset": "btc",
        "sourceAmount": "100000000",
        "opCreatedAt": "2024-01-01T00:00:00Z",
        "sourceChain": "btc",
        "destinationChain": "hl",
        "sourceAddress": "addr,with,commas",
    })

    text = to_delimited_text([record])
    header, row = _parse(text)

    assert row[header.index("Source Address")] == "addr,with,commas"
    assert row[header.index("Amount")] == "1 BTC"
    assert '"addr,with,commas"' in text


def test_quotes_are_doubled_and_plain_cells_unquoted() -> None:
    record = OperationRecord.from_dict({"asset": "eth", "sourceAddress": 'say "hi"', "protocolAddress": "line\nbreak"})

    text = to_delimited_text([record], COLUMNS)

    assert '"say ""hi"""' in text
    assert '"line\nbreak"' in text
    assert ",ETH," in text
    assert text.startswith("Time,Asset,Route,")


def test_export_matches_display_grid(raw_operation) -> None:
    records = order_by_recency([
        OperationRecord.from_dict({**raw_operation, "opCreatedAt": "2024-01-01T00:00:00Z", "sourceTxHash": "older"}),
        OperationRecord.from_dict({**raw_operation, "sourceAddress": 'a,"b"\r\nc', "sourceTxHash": "newer"}),
    ])

    rows = _parse(to_delimited_text(records))

    assert rows[1:] == project_table(records).values.tolist()
    assert [r[rows[0].index("Source Tx")] for r in rows[1:]] == ["newer", "older"]


def test_export_filename_is_timestamped() -> None:
    now = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)

    assert export_filename("0xa6f1Ef42D335Ec7CbfC39f57269c851568300132", now) == \
        "unit-operations-0xa6f1Ef42-20240506-070809.csv"
    assert export_filename("", now) == "unit-operations-20240506-070809.csv"
