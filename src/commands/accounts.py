"""
Account commands: list stored keypairs and show an account's balances.
"""

from commands.context import CommandContext
from commands.results import (
    AccountBalanceResult,
    AccountListResult,
    CommandFailure,
    failure_from_exception,
)
from commands.validation import parse_token_address
from core.balances import format_amount, get_sol_balance, get_spl_balance
from core.exceptions import PumpFunToolkitError
from core.keystore import KeypairStore
from utils.logger import get_logger

logger = get_logger(__name__)


def list_accounts(keystore: KeypairStore) -> AccountListResult | CommandFailure:
    """List the accounts in the keys folder. Needs no network access."""
    try:
        folder_created = not keystore.exists()
        accounts = keystore.list_accounts()
        return AccountListResult(
            keys_folder=keystore.keys_folder.resolve(),
            accounts=accounts,
            folder_created=folder_created,
        )
    except PumpFunToolkitError as e:
        return failure_from_exception(e)


async def get_account_balance(
    ctx: CommandContext,
    account_name: str = "default",
    token_address: str | None = None,
) -> AccountBalanceResult | CommandFailure:
    """Read the SOL balance of an existing account and, optionally, a token balance.

    The account is loaded, not created: an unknown name is an error.
    """
    try:
        mint = parse_token_address(token_address) if token_address else None
        wallet = ctx.keystore.load(account_name)

        sol_balance = await get_sol_balance(ctx.client, wallet.pubkey)
        token_balance = None
        if mint is not None:
            token_balance = await get_spl_balance(ctx.client, mint, wallet.pubkey)

        return AccountBalanceResult(
            account_name=wallet.name,
            account_address=str(wallet.pubkey),
            sol_balance=sol_balance,
            token_address=str(mint) if mint else None,
            token_balance=token_balance,
        )
    except PumpFunToolkitError as e:
        return failure_from_exception(e)
    except Exception as e:
        logger.exception(f"Error getting balance of account {account_name}")
        return failure_from_exception(e)


def format_account_list(result: AccountListResult | CommandFailure) -> str:
    if not result.success:
        return f"Error listing accounts: {result.error}"
    if not result.accounts:
        if result.folder_created:
            return (
                f"No accounts found. Keys folder created at {result.keys_folder}. "
                "Use the create-token or buy-token tools to create an account."
            )
        return (
            f"No accounts found in {result.keys_folder}. "
            "Use the create-token or buy-token tools to create an account."
        )
    lines = [f"Accounts in {result.keys_folder}:", ""]
    lines.extend(f"{entry.name}: {entry.public_key}" for entry in result.accounts)
    return "\n".join(lines)


def format_account_balance(result: AccountBalanceResult | CommandFailure) -> str:
    if not result.success:
        return f"Error getting account balance: {result.error}"
    lines = [
        f"Account: {result.account_name} ({result.account_address})",
        f"SOL Balance: {format_amount(result.sol_balance)} SOL",
    ]
    if result.token_address:
        lines.append(f"Token Balance ({result.token_address}): {result.token_balance}")
    return "\n".join(lines)
