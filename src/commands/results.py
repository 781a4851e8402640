"""
Result types returned by the command operations.

Every command returns either its own success dataclass or a shared
``CommandFailure``. Both expose ``success`` so callers can branch without
isinstance checks, and formatters can match on the type.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from core.balances import TokenBalance
from core.exceptions import (
    AccountNotFoundError,
    ConfigurationError,
    CorruptKeyFileError,
    InsufficientFundsError,
    KeystoreIOError,
    SDKError,
    ValidationError,
)
from core.keystore import AccountEntry


class ErrorKind(Enum):
    """Classification of a failed command."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    IO = "io"
    CORRUPT_KEY = "corrupt_key"
    ACCOUNT_NOT_FOUND = "account_not_found"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    NO_TOKENS = "no_tokens"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    SDK = "sdk"


@dataclass(frozen=True)
class CommandFailure:
    """A command that did not complete."""

    kind: ErrorKind
    error: str

    success = False


@dataclass
class TokenInfoResult:
    token_address: str
    total_supply: float
    virtual_token_reserves: float
    virtual_sol_reserves: float
    real_token_reserves: float
    real_sol_reserves: float
    complete: bool
    creator: str | None
    pumpfun_url: str
    global_account: dict | None = None

    success = True


@dataclass
class BuyResult:
    token_address: str
    account_name: str
    account_address: str
    amount_spent: float
    tokens_purchased: float | None  # None when a balance read failed
    new_balance: TokenBalance
    signature: str | None
    pumpfun_url: str

    success = True


@dataclass
class SellResult:
    token_address: str
    account_name: str
    account_address: str
    tokens_sold: float
    sol_received: float
    new_token_balance: TokenBalance
    signature: str | None
    pumpfun_url: str

    success = True


@dataclass
class CreateTokenResult:
    token_address: str
    token_name: str
    token_symbol: str
    account_name: str
    account_address: str
    token_balance: TokenBalance
    signature: str | None
    pumpfun_url: str
    metadata_uri: str | None = None
    mint_key_file: Path | None = None

    success = True


@dataclass
class AccountListResult:
    keys_folder: Path
    accounts: list[AccountEntry] = field(default_factory=list)
    folder_created: bool = False

    success = True


@dataclass
class AccountBalanceResult:
    account_name: str
    account_address: str
    sol_balance: float
    token_address: str | None = None
    token_balance: TokenBalance | None = None

    success = True


def describe_error(exc: BaseException) -> str:
    """Plain-text message for an exception."""
    message = str(exc)
    if message:
        return message
    return exc.__class__.__name__ or "Unknown error"


def failure_from_exception(exc: BaseException) -> CommandFailure:
    """Map an exception raised while running a command to a CommandFailure."""
    if isinstance(exc, ValidationError):
        kind = ErrorKind.VALIDATION
    elif isinstance(exc, ConfigurationError):
        kind = ErrorKind.CONFIGURATION
    elif isinstance(exc, AccountNotFoundError):
        kind = ErrorKind.ACCOUNT_NOT_FOUND
    elif isinstance(exc, CorruptKeyFileError):
        kind = ErrorKind.CORRUPT_KEY
    elif isinstance(exc, KeystoreIOError):
        kind = ErrorKind.IO
    elif isinstance(exc, InsufficientFundsError):
        kind = ErrorKind.INSUFFICIENT_FUNDS
    elif isinstance(exc, SDKError):
        kind = ErrorKind.SDK
    else:
        kind = ErrorKind.NETWORK
    return CommandFailure(kind, describe_error(exc))
