"""
Create-token command: launch a new pump.fun token and make the first buy.
"""

from pathlib import Path

from solders.keypair import Keypair

from commands.context import CommandContext
from commands.results import (
    CommandFailure,
    CreateTokenResult,
    ErrorKind,
    failure_from_exception,
)
from commands.trading import CREATE_FEE_RESERVE_SOL, ensure_sol_for
from commands.validation import (
    DEFAULT_SLIPPAGE_BASIS_POINTS,
    MIN_SOL_AMOUNT,
    require_text,
    validate_amount,
    validate_slippage,
)
from core.balances import get_spl_balance
from core.exceptions import KeystoreError, PumpFunToolkitError, ValidationError
from core.pubkeys import pump_fun_url
from interfaces.core import DEFAULT_PRIORITY_FEE, PriorityFee, TokenMetadata
from utils.logger import get_logger

logger = get_logger(__name__)


def _resolve_image(image_path: str | Path | None) -> Path | None:
    if image_path is None or (isinstance(image_path, str) and not image_path.strip()):
        return None
    path = Path(image_path).expanduser()
    if not path.is_file():
        raise ValidationError(f"Image file not found: {path}")
    return path


async def create_token(
    ctx: CommandContext,
    name: str,
    symbol: str,
    description: str,
    initial_buy_amount: float,
    image_path: str | Path | None = None,
    account_name: str = "default",
    slippage_basis_points: int = DEFAULT_SLIPPAGE_BASIS_POINTS,
    priority_fee: PriorityFee = DEFAULT_PRIORITY_FEE,
    twitter: str | None = None,
    telegram: str | None = None,
    website: str | None = None,
) -> CreateTokenResult | CommandFailure:
    """Create a token and buy ``initial_buy_amount`` SOL of it in the same transaction.

    The new mint keypair is saved as ``mint-<pubkey>.json`` in the keys
    folder once the token exists on chain.

    Returns:
        CreateTokenResult, or CommandFailure
    """
    try:
        name = require_text(name, "Token name")
        symbol = require_text(symbol, "Token symbol")
        description = description.strip() if isinstance(description, str) else ""
        initial_buy_amount = validate_amount(
            initial_buy_amount, "Initial buy amount", minimum=MIN_SOL_AMOUNT
        )
        slippage_basis_points = validate_slippage(slippage_basis_points)
        image = _resolve_image(image_path)

        wallet = ctx.keystore.get_or_create(account_name)
        logger.info(f"Using account {wallet.name}: {wallet.pubkey}")
        await ensure_sol_for(ctx, wallet, initial_buy_amount, CREATE_FEE_RESERVE_SOL)

        mint = Keypair()
        logger.info(f"Creating token {name} ({symbol}) with mint {mint.pubkey()}")
        metadata = TokenMetadata(
            name=name,
            symbol=symbol,
            description=description,
            image_path=image,
            twitter=twitter,
            telegram=telegram,
            website=website,
        )
        result = await ctx.sdk.create_and_buy(
            wallet,
            mint,
            metadata,
            initial_buy_amount,
            slippage_basis_points,
            priority_fee,
        )
        if not result.success:
            return CommandFailure(ErrorKind.SDK, result.error or "Unknown error")

        mint_key_file = None
        try:
            mint_key_file = ctx.keystore.save_mint_keypair(mint)
        except KeystoreError as e:
            logger.error(f"Token {mint.pubkey()} created but its mint key was not saved: {e}")

        token_balance = await get_spl_balance(ctx.client, mint.pubkey(), wallet.pubkey)

        return CreateTokenResult(
            token_address=str(mint.pubkey()),
            token_name=name,
            token_symbol=symbol,
            account_name=wallet.name,
            account_address=str(wallet.pubkey),
            token_balance=token_balance,
            signature=result.signature,
            pumpfun_url=pump_fun_url(mint.pubkey()),
            metadata_uri=result.extra.get("metadata_uri"),
            mint_key_file=mint_key_file,
        )
    except PumpFunToolkitError as e:
        return failure_from_exception(e)
    except Exception as e:
        logger.exception(f"Error creating token {name}")
        return failure_from_exception(e)


def format_create_result(result: CreateTokenResult | CommandFailure) -> str:
    if not result.success:
        return f"Error creating token: {result.error}"
    lines = [
        "Successfully created token!",
        f"Token Address: {result.token_address}",
        f"Token Name: {result.token_name}",
        f"Token Symbol: {result.token_symbol}",
        f"Your Balance: {result.token_balance}",
        f"Transaction Signature: {result.signature}",
        f"Pump.fun URL: {result.pumpfun_url}",
    ]
    if result.mint_key_file is None:
        lines.append("Warning: the mint keypair could not be saved")
    return "\n".join(lines)

