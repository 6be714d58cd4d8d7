from src.consts import ASSET_DECIMALS, DEFAULT_ASSET_DECIMALS


def asset_decimals(asset: str | None) -> int:
    return ASSET_DECIMALS.get((asset or '').lower(), DEFAULT_ASSET_DECIMALS)


def parse_base_units(raw) -> int | None:
    text = str(raw).strip()
    # int() would also accept signs and underscores, base units are plain digits
    if not text or not text.isascii() or not text.isdigit():
        return None
    return int(text)


def human_amount(asset: str | None, raw) -> str:
    """
    converts a base-unit amount (e.g. sats, wei) to a decimal string
    using exact integer arithmetic so 18-decimal assets keep every digit.
    unparseable amounts are returned as-is
    """
    if raw is None or raw == '':
        return ''

    n = parse_base_units(raw)
    if n is None:
        return str(raw)

    decimals = asset_decimals(asset)
    integer_part, fractional_part = divmod(n, 10 ** decimals)
    frac = str(fractional_part).zfill(decimals).rstrip('0') if decimals else ''

    return f'{integer_part}.{frac}' if frac else f'{integer_part}'


def parse_human_amount(asset: str | None, text: str) -> int:
    """
    inverse of human_amount: scales a decimal string back to base units
    raises ValueError if text is not a plain non-negative decimal
    """
    decimals = asset_decimals(asset)
    integer_part, _, frac = text.strip().partition('.')
    if not integer_part.isdigit() or (frac and not frac.isdigit()):
        raise ValueError(f'not a decimal amount: {text!r}')
    if len(frac) > decimals:
        raise ValueError(f'{text!r} has more than {decimals} decimal places')

    return int(integer_part) * 10 ** decimals + int(frac.ljust(decimals, '0') or 0)
