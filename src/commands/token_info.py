"""
Token info command: read a token's bonding curve.
"""

from commands.context import CommandContext
from commands.results import (
    CommandFailure,
    ErrorKind,
    TokenInfoResult,
    failure_from_exception,
)
from commands.validation import parse_token_address
from core.balances import format_amount
from core.exceptions import PumpFunToolkitError
from core.pubkeys import LAMPORTS_PER_SOL, TOKEN_DECIMALS, pump_fun_url
from utils.logger import get_logger

logger = get_logger(__name__)


async def get_token_info(
    ctx: CommandContext, token_address: str, include_global: bool = False
) -> TokenInfoResult | CommandFailure:
    """Fetch the bonding curve state of a token.

    Args:
        ctx: Command context
        token_address: Mint address
        include_global: Also read the pump.fun global account

    Returns:
        TokenInfoResult, or a NOT_FOUND failure if the token has no bonding curve
    """
    try:
        mint = parse_token_address(token_address)
        logger.info(f"Getting token info for {mint}")

        curve = await ctx.sdk.get_bonding_curve_account(mint)
        if curve is None:
            return CommandFailure(
                ErrorKind.NOT_FOUND, f"No token found with address {mint}"
            )

        global_info = None
        if include_global:
            global_account = await ctx.sdk.get_global_account()
            global_info = {
                "initialized": global_account.initialized,
                "authority": str(global_account.authority),
                "fee_recipient": str(global_account.fee_recipient),
                "initial_virtual_token_reserves": global_account.initial_virtual_token_reserves
                / 10**TOKEN_DECIMALS,
                "initial_virtual_sol_reserves": global_account.initial_virtual_sol_reserves
                / LAMPORTS_PER_SOL,
                "initial_real_token_reserves": global_account.initial_real_token_reserves
                / 10**TOKEN_DECIMALS,
                "token_total_supply": global_account.token_total_supply
                / 10**TOKEN_DECIMALS,
                "fee_basis_points": global_account.fee_basis_points,
            }

        return TokenInfoResult(
            token_address=str(mint),
            total_supply=curve.total_supply_decimal,
            virtual_token_reserves=curve.virtual_token_reserves_decimal,
            virtual_sol_reserves=curve.virtual_sol_reserves_decimal,
            real_token_reserves=curve.real_token_reserves_decimal,
            real_sol_reserves=curve.real_sol_reserves_decimal,
            complete=curve.complete,
            creator=str(curve.creator) if curve.creator else None,
            pumpfun_url=pump_fun_url(mint),
            global_account=global_info,
        )
    except PumpFunToolkitError as e:
        return failure_from_exception(e)
    except Exception as e:
        logger.exception(f"Error getting token info for {token_address}")
        return failure_from_exception(e)


def format_token_info(result: TokenInfoResult | CommandFailure) -> str:
    if not result.success:
        if result.kind is ErrorKind.NOT_FOUND:
            return result.error
        return f"Error getting token info: {result.error}"

    lines = [
        f"Token: {result.token_address}",
        f"Supply: {format_amount(result.total_supply)}",
        f"Virtual Token Reserves: {format_amount(result.virtual_token_reserves)}",
        f"Virtual SOL Reserves: {format_amount(result.virtual_sol_reserves)} SOL",
        f"Real Token Reserves: {format_amount(result.real_token_reserves)}",
        f"Real SOL Reserves: {format_amount(result.real_sol_reserves)} SOL",
        f"Bonding Curve Complete: {'Yes' if result.complete else 'No'}",
    ]
    if result.creator:
        lines.append(f"Creator: {result.creator}")
    lines.append(f"Pump.fun URL: {result.pumpfun_url}")

    if result.global_account:
        lines.append("")
        lines.append("Global Account:")
        for key, value in result.global_account.items():
            lines.append(f"  {key}: {value}")
    return "\n".join(lines)
