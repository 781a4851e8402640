"""
Input checks shared by the command operations.
"""

import math

from solders.pubkey import Pubkey

from core.exceptions import ValidationError

MIN_SOL_AMOUNT = 0.0001
DEFAULT_SLIPPAGE_BASIS_POINTS = 100
MAX_SLIPPAGE_BASIS_POINTS = 10_000


def parse_token_address(token_address: str) -> Pubkey:
    """Parse a base58 mint address.

    Raises:
        ValidationError: If the address is not a valid public key
    """
    if not isinstance(token_address, str) or not token_address.strip():
        raise ValidationError("Token address is required")
    try:
        return Pubkey.from_string(token_address.strip())
    except ValueError as e:
        raise ValidationError(f"Invalid token address: {token_address}") from e


def validate_amount(value, label: str, minimum: float = 0.0) -> float:
    """Check that ``value`` is a finite number not below ``minimum``."""
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a number")
    try:
        amount = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{label} must be a number") from e
    if not math.isfinite(amount):
        raise ValidationError(f"{label} must be a finite number")
    if amount < minimum:
        raise ValidationError(f"{label} must be at least {minimum:g}")
    return amount


def validate_slippage(value) -> int:
    """Check a slippage tolerance given in basis points (100 = 1%)."""
    if isinstance(value, bool):
        raise ValidationError("Slippage basis points must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError("Slippage basis points must be an integer")
        value = int(value)
    try:
        slippage = int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError("Slippage basis points must be an integer") from e
    if not 0 <= slippage <= MAX_SLIPPAGE_BASIS_POINTS:
        raise ValidationError(
            f"Slippage basis points must be between 0 and {MAX_SLIPPAGE_BASIS_POINTS}"
        )
    return slippage


def require_text(value, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required")
    return value.strip()
