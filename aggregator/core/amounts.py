"""Token amount conversion and request validation helpers."""

import re
from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

from .types import Token

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

# Base units travel as uint256 in the split query
UINT256_MAX = 2**256 - 1
UINT256_DIGITS = len(str(UINT256_MAX))


def parse_amount(amount: str | int | Decimal) -> Decimal | None:
    """Parse a decimal amount; None when not a finite number."""
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return value


def from_token_amount(amount: str | int | Decimal, decimals: int) -> int:
    """Convert a decimal token amount to integer base units.

    Digits beyond the token's precision are truncated. The scaling is exact
    for any number of digits.

    Args:
        amount: Amount in token units, e.g. "1.5"
        decimals: Token decimals

    Returns:
        Amount in base units

    Raises:
        ValueError: If the amount is not a finite number or does not fit in
            a uint256
    """
    value = parse_amount(amount)
    if value is None:
        raise ValueError(f"Invalid token amount: {amount!r}")
    if value.is_zero() or value.adjusted() + decimals < 0:
        return 0
    if value.adjusted() + decimals >= UINT256_DIGITS:
        raise ValueError(f"Token amount out of range: {amount!r}")

    with localcontext() as ctx:
        ctx.prec = max(UINT256_DIGITS + 2, len(value.as_tuple().digits))
        scaled = value.scaleb(decimals).quantize(Decimal(1), rounding=ROUND_DOWN)
    base_units = int(scaled)
    if abs(base_units) > UINT256_MAX:
        raise ValueError(f"Token amount out of range: {amount!r}")
    return base_units


def to_token_amount(base_units: int, decimals: int) -> Decimal:
    """Convert integer base units back to a decimal token amount, exactly."""
    value = Decimal(int(base_units))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits))
        return value.scaleb(-decimals)


def is_valid_address(address: str) -> bool:
    return isinstance(address, str) and bool(_ADDRESS_RE.match(address))


def validate_tokens(src_token: Token, dst_token: Token) -> bool:
    """Both addresses must be well formed and distinct."""
    if not is_valid_address(src_token.address) or not is_valid_address(
        dst_token.address
    ):
        return False
    return not src_token.same_address(dst_token)


def validate_amount(amount: str) -> bool:
    value = parse_amount(amount)
    return value is not None and value > 0


def is_native_token(token: Token, native_address: str) -> bool:
    return token.address.lower() == native_address.lower()


def is_wrapped_token(token: Token, wrapped_address: str) -> bool:
    return token.address.lower() == wrapped_address.lower()
