
MAX_UINT256 = 2**256 - 1


def abbreviate(value: str) -> str:
    """
    Abbreviates an address or hash to its first 6 and last 4 characters

    >>> abbreviate("0x1111111111111111111111111111111111112222")
    '0x1111...2222'
    """
    if len(value) > 10:
        return f"{value[:6]}...{value[-4:]}"
    return value


def format_amount(amount: str | int, decimals: int) -> str:
    """
    Scales a raw token amount by the token decimals, and strips trailing zeros from the fraction.
    Amounts that are not integers are returned unchanged.

    >>> format_amount("1500000", 6)
    '1.5'
    >>> format_amount(10**18, 18)
    '1'
    >>> format_amount("1234567", 6)
    '1.234567'
    """
    try:
        raw_amount = int(amount)
    except (TypeError, ValueError):
        return str(amount)

    if decimals <= 0:
        return str(raw_amount)

    whole, fraction = divmod(raw_amount, 10**decimals)
    if fraction == 0:
        return str(whole)

    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{fraction_str}"


def is_unlimited(amount: str | int) -> bool:
    """True if the amount is the max uint256 value used for unlimited approvals"""
    try:
        return int(amount) == MAX_UINT256
    except (TypeError, ValueError):
        return False


def is_zero(amount: str | int) -> bool:
    """True if the amount parses to zero"""
    try:
        return int(amount) == 0
    except (TypeError, ValueError):
        return False
