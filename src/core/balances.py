"""
SOL and SPL token balance lookups.

A token balance has three outcomes: the owner holds an account for the mint
(``FOUND``), the owner has never held the mint (``NO_ACCOUNT``), or the RPC
query failed (``QUERY_FAILED``). ``TokenBalance.amount`` is ``None`` for the
last two, so callers that only care about "is there a balance" can ignore the
distinction.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from solders.pubkey import Pubkey

from core.client import SolanaClient
from core.pubkeys import LAMPORTS_PER_SOL
from utils.logger import get_logger

logger = get_logger(__name__)

NO_TOKEN_ACCOUNT_TEXT = "No token account found"


def format_amount(value: float, decimals: int = 9) -> str:
    """Fixed-point amount with trailing zeros removed (1.500000000 -> 1.5)."""
    text = f"{value:.{decimals}f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


class BalanceStatus(Enum):
    """Outcome of a token balance lookup."""

    FOUND = "found"
    NO_ACCOUNT = "no_account"
    QUERY_FAILED = "query_failed"


@dataclass(frozen=True)
class TokenBalance:
    """Token holdings of one owner for one mint, read at call time."""

    status: BalanceStatus
    amount: float | None = None  # UI amount, set only when FOUND
    error: str | None = None  # set only when QUERY_FAILED

    @classmethod
    def found(cls, amount: float) -> "TokenBalance":
        return cls(BalanceStatus.FOUND, amount=amount)

    @classmethod
    def no_account(cls) -> "TokenBalance":
        return cls(BalanceStatus.NO_ACCOUNT)

    @classmethod
    def query_failed(cls, error: str) -> "TokenBalance":
        return cls(BalanceStatus.QUERY_FAILED, error=error)

    @property
    def is_found(self) -> bool:
        return self.status is BalanceStatus.FOUND

    def amount_or_zero(self) -> float:
        return self.amount if self.amount is not None else 0.0

    def __str__(self) -> str:
        if self.status is BalanceStatus.FOUND:
            return format_amount(self.amount)
        if self.status is BalanceStatus.NO_ACCOUNT:
            return NO_TOKEN_ACCOUNT_TEXT
        return f"Unavailable ({self.error})"


def _ui_amount(keyed_account: Any) -> float:
    """Read the UI amount out of a jsonParsed token account."""
    info = keyed_account.account.data.parsed["info"]
    token_amount = info["tokenAmount"]
    ui_amount = token_amount.get("uiAmount")
    if ui_amount is None:
        ui_amount = token_amount["uiAmountString"]
    return float(ui_amount)


async def get_spl_balance(
    client: SolanaClient, mint: Pubkey, owner: Pubkey
) -> TokenBalance:
    """Get the balance of ``mint`` held by ``owner``.

    If the owner has several token accounts for the same mint, the first one
    returned by the node is used. Amounts are not summed across accounts.

    Args:
        client: Solana RPC client
        mint: Token mint
        owner: Wallet public key

    Returns:
        TokenBalance describing the outcome. This function does not raise.
    """
    try:
        accounts = await client.get_parsed_token_accounts(owner, mint)
        if not accounts:
            return TokenBalance.no_account()
        if len(accounts) > 1:
            logger.debug(
                f"Owner {owner} has {len(accounts)} token accounts for {mint}, using the first"
            )
        return TokenBalance.found(_ui_amount(accounts[0]))
    except Exception as e:
        logger.error(f"Error getting SPL balance of {mint} for {owner}: {e}")
        return TokenBalance.query_failed(str(e) or e.__class__.__name__)


async def get_sol_balance(client: SolanaClient, owner: Pubkey) -> float:
    """Get the SOL balance of ``owner``.

    Raises:
        Exception: Any RPC failure is propagated
    """
    lamports = await client.get_sol_balance(owner)
    return lamports / LAMPORTS_PER_SOL
