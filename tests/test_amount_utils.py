import pytest

from src.utils.amount_utils import asset_decimals, human_amount, parse_human_amount


def test_eth_amount_keeps_all_eighteen_decimals() -> None:
    assert human_amount("eth", "1230000000000000000") == "1.23"
    assert human_amount("eth", "1000000000000000001") == "1.000000000000000001"


def test_asset_lookup_is_case_insensitive() -> None:
    assert human_amount("BTC", "100000000") == "1"
    assert human_amount("Sol", "1500000000") == "1.5"


def test_unknown_asset_uses_default_precision() -> None:
    assert asset_decimals("unknownasset") == 6
    assert human_amount("unknownasset", "1500000") == "1.5"
    assert human_amount(None, "1500000") == "1.5"


@pytest.mark.parametrize("raw", ["", None])
def test_missing_amount_is_empty_string(raw) -> None:
    assert human_amount("btc", raw) == ""


def test_zero_and_sub_unit_amounts() -> None:
    assert human_amount("btc", "0") == "0"
    assert human_amount("btc", "1") == "0.00000001"
    assert human_amount("btc", "10") == "0.0000001"


def test_integer_input_is_accepted() -> None:
    assert human_amount("btc", 250000000) == "2.5"


@pytest.mark.parametrize("raw", ["abc", "-5", "1.5", "1_000", "0x10"])
def test_unparseable_amount_is_returned_unchanged(raw) -> None:
    assert human_amount("btc", raw) == raw


@pytest.mark.parametrize(
    "asset,raw",
    [
        ("eth", "1230000000000000000"),
        ("eth", "123456789012345678901234567890"),
        ("btc", "2100000000000000"),
        ("sol", "999999999"),
        ("usdc", "7"),
        ("eth", "0"),
    ],
)
def test_human_amount_scales_back_exactly(asset, raw) -> None:
    """Scaling the human string back to base units gives the original integer."""
    assert parse_human_amount(asset, human_amount(asset, raw)) == int(raw)


def test_parse_human_amount_rejects_excess_precision() -> None:
    with pytest.raises(ValueError):
        parse_human_amount("btc", "0.000000001")
    with pytest.raises(ValueError):
        parse_human_amount("btc", "one")
