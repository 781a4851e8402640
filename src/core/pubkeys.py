"""
Unit constants and pump.fun links.
"""

from typing import Final

from solders.pubkey import Pubkey

LAMPORTS_PER_SOL: Final[int] = 1_000_000_000
TOKEN_DECIMALS: Final[int] = 6

PUMP_FUN_URL: Final[str] = "https://pump.fun"


def pump_fun_url(mint: Pubkey | str) -> str:
    """Public pump.fun page of a token."""
    return f"{PUMP_FUN_URL}/{mint}"
