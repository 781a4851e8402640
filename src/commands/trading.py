"""
Buy and sell commands.

Both resolve the named account through the keypair store (creating it on
first use), check balances before trading, delegate the trade to the
launchpad SDK, and report the balance change read back from the chain.
"""

from commands.context import CommandContext
from commands.results import (
    BuyResult,
    CommandFailure,
    ErrorKind,
    SellResult,
    failure_from_exception,
)
from commands.validation import (
    DEFAULT_SLIPPAGE_BASIS_POINTS,
    MIN_SOL_AMOUNT,
    parse_token_address,
    validate_amount,
    validate_slippage,
)
from core.balances import (
    BalanceStatus,
    TokenBalance,
    format_amount,
    get_spl_balance,
)
from core.exceptions import InsufficientFundsError, PumpFunToolkitError
from core.pubkeys import LAMPORTS_PER_SOL, pump_fun_url
from core.wallet import Wallet
from interfaces.core import DEFAULT_PRIORITY_FEE, PriorityFee
from utils.logger import get_logger

logger = get_logger(__name__)

# SOL kept aside for transaction and account rent fees
BUY_FEE_RESERVE_SOL = 0.001
CREATE_FEE_RESERVE_SOL = 0.003

UNAVAILABLE_TEXT = "Unavailable"


def sol_to_lamports(amount: float) -> int:
    return int(round(amount * LAMPORTS_PER_SOL))


def tokens_purchased(initial: TokenBalance, new: TokenBalance) -> float | None:
    """Token delta of a buy, or None if either balance read failed."""
    if BalanceStatus.QUERY_FAILED in (initial.status, new.status):
        return None
    return new.amount_or_zero() - initial.amount_or_zero()


def display_balance(balance: TokenBalance) -> str:
    # an absent token account after a trade means the balance is zero
    if balance.status is BalanceStatus.QUERY_FAILED:
        return str(balance)
    return format_amount(balance.amount_or_zero())


async def ensure_sol_for(
    ctx: CommandContext, wallet: Wallet, amount: float, reserve: float
) -> int:
    """Check that ``wallet`` can spend ``amount`` SOL plus ``reserve`` for fees.

    Returns:
        Current balance in lamports

    Raises:
        InsufficientFundsError: If the balance is too low
    """
    lamports = await ctx.client.get_sol_balance(wallet.pubkey)
    required = sol_to_lamports(amount + reserve)
    logger.info(f"Account {wallet.name} SOL balance: {lamports / LAMPORTS_PER_SOL} SOL")
    if lamports < required:
        raise InsufficientFundsError(
            f"Insufficient SOL balance. Account {wallet.name} ({wallet.pubkey}) has "
            f"{format_amount(lamports / LAMPORTS_PER_SOL)} SOL, but needs at least "
            f"{format_amount(required / LAMPORTS_PER_SOL)} SOL. "
            "Please send SOL to this address and try again."
        )
    return lamports


async def buy_token(
    ctx: CommandContext,
    token_address: str,
    buy_amount: float,
    account_name: str = "default",
    slippage_basis_points: int = DEFAULT_SLIPPAGE_BASIS_POINTS,
    priority_fee: PriorityFee = DEFAULT_PRIORITY_FEE,
) -> BuyResult | CommandFailure:
    """Buy a token with SOL.

    Args:
        ctx: Command context
        token_address: Mint address
        buy_amount: SOL to spend
        account_name: Keypair store account paying for the trade
        slippage_basis_points: Slippage tolerance (100 = 1%)
        priority_fee: Compute budget settings

    Returns:
        BuyResult with the tokens received, or CommandFailure
    """
    try:
        mint = parse_token_address(token_address)
        buy_amount = validate_amount(buy_amount, "Buy amount", minimum=MIN_SOL_AMOUNT)
        slippage_basis_points = validate_slippage(slippage_basis_points)

        wallet = ctx.keystore.get_or_create(account_name)
        logger.info(f"Using account {wallet.name}: {wallet.pubkey}")

        await ensure_sol_for(ctx, wallet, buy_amount, BUY_FEE_RESERVE_SOL)
        initial = await get_spl_balance(ctx.client, mint, wallet.pubkey)
        logger.info(f"Initial token balance: {initial}")

        logger.info(f"Buying {mint} for {buy_amount} SOL with {slippage_basis_points} bps slippage")
        result = await ctx.sdk.buy(
            wallet, mint, buy_amount, slippage_basis_points, priority_fee
        )
        if not result.success:
            return CommandFailure(ErrorKind.SDK, result.error or "Unknown error")

        new_balance = await get_spl_balance(ctx.client, mint, wallet.pubkey)
        logger.info(f"New token balance: {new_balance}")

        return BuyResult(
            token_address=str(mint),
            account_name=wallet.name,
            account_address=str(wallet.pubkey),
            amount_spent=buy_amount,
            tokens_purchased=tokens_purchased(initial, new_balance),
            new_balance=new_balance,
            signature=result.signature,
            pumpfun_url=pump_fun_url(mint),
        )
    except PumpFunToolkitError as e:
        return failure_from_exception(e)
    except Exception as e:
        logger.exception(f"Error buying token {token_address}")
        return failure_from_exception(e)


async def sell_token(
    ctx: CommandContext,
    token_address: str,
    sell_amount: float = 0,
    account_name: str = "default",
    slippage_basis_points: int = DEFAULT_SLIPPAGE_BASIS_POINTS,
    priority_fee: PriorityFee = DEFAULT_PRIORITY_FEE,
) -> SellResult | CommandFailure:
    """Sell a token for SOL.

    A ``sell_amount`` of 0 sells the whole balance. Amounts above the
    balance are clamped to it.
    """
    try:
        mint = parse_token_address(token_address)
        sell_amount = validate_amount(sell_amount, "Sell amount", minimum=0.0)
        slippage_basis_points = validate_slippage(slippage_basis_points)

        wallet = ctx.keystore.get_or_create(account_name)
        logger.info(f"Using account {wallet.name}: {wallet.pubkey}")

        balance = await get_spl_balance(ctx.client, mint, wallet.pubkey)
        if balance.status is BalanceStatus.QUERY_FAILED:
            return CommandFailure(
                ErrorKind.NETWORK, f"Could not read token balance: {balance.error}"
            )
        if not balance.is_found or balance.amount_or_zero() <= 0:
            return CommandFailure(
                ErrorKind.NO_TOKENS,
                f"No tokens to sell. Account {wallet.name} has 0 tokens of {mint}.",
            )

        held = balance.amount_or_zero()
        amount_to_sell = held if sell_amount == 0 else min(sell_amount, held)
        if sell_amount > held:
            logger.info(f"Sell amount {sell_amount} exceeds balance, selling {held}")

        initial_lamports = await ctx.client.get_sol_balance(wallet.pubkey)

        logger.info(f"Selling {amount_to_sell} of {mint} with {slippage_basis_points} bps slippage")
        result = await ctx.sdk.sell(
            wallet, mint, amount_to_sell, slippage_basis_points, priority_fee
        )
        if not result.success:
            return CommandFailure(ErrorKind.SDK, result.error or "Unknown error")

        new_lamports = await ctx.client.get_sol_balance(wallet.pubkey)
        new_balance = await get_spl_balance(ctx.client, mint, wallet.pubkey)

        return SellResult(
            token_address=str(mint),
            account_name=wallet.name,
            account_address=str(wallet.pubkey),
            tokens_sold=amount_to_sell,
            sol_received=(new_lamports - initial_lamports) / LAMPORTS_PER_SOL,
            new_token_balance=new_balance,
            signature=result.signature,
            pumpfun_url=pump_fun_url(mint),
        )
    except PumpFunToolkitError as e:
        return failure_from_exception(e)
    except Exception as e:
        logger.exception(f"Error selling token {token_address}")
        return failure_from_exception(e)


def format_buy_result(result: BuyResult | CommandFailure) -> str:
    if not result.success:
        return f"Error buying token: {result.error}"
    purchased = (
        UNAVAILABLE_TEXT
        if result.tokens_purchased is None
        else format_amount(result.tokens_purchased)
    )
    return "\n".join(
        [
            "Successfully bought token!",
            f"Token Address: {result.token_address}",
            f"Amount Spent: {format_amount(result.amount_spent)} SOL",
            f"Tokens Purchased: {purchased}",
            f"New Balance: {display_balance(result.new_balance)}",
            f"Transaction Signature: {result.signature}",
            f"Pump.fun URL: {result.pumpfun_url}",
        ]
    )


def format_sell_result(result: SellResult | CommandFailure) -> str:
    if not result.success:
        return f"Error selling token: {result.error}"
    return "\n".join(
        [
            "Successfully sold token!",
            f"Token Address: {result.token_address}",
            f"Tokens Sold: {format_amount(result.tokens_sold)}",
            f"SOL Received: {format_amount(result.sol_received)} SOL",
            f"Remaining Token Balance: {display_balance(result.new_token_balance)}",
            f"Transaction Signature: {result.signature}",
            f"Pump.fun URL: {result.pumpfun_url}",
        ]
    )
