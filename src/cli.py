"""
Command line interface for the pump.fun toolkit.

Usage examples:
    pumpfun info <mint>
    pumpfun buy <mint> 0.01 trader 200
    pumpfun sell <mint> 0 trader
    pumpfun create "My Token" MTK "A test token" 0.05 --image ./logo.png
    pumpfun accounts
    pumpfun balance trader <mint>

Command output goes to stdout, logs go to stderr.
"""

import argparse
import asyncio
import logging
import sys

from commands import (
    buy_token,
    create_token,
    format_account_balance,
    format_account_list,
    format_buy_result,
    format_create_result,
    format_sell_result,
    format_token_info,
    get_account_balance,
    get_token_info,
    list_accounts,
    open_context,
    sell_token,
)
from commands.validation import DEFAULT_SLIPPAGE_BASIS_POINTS
from config_loader import Settings, load_settings
from core.exceptions import ConfigurationError
from core.keystore import KeypairStore
from utils.logger import get_logger, setup_console_logging, setup_file_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pumpfun",
        description="Create, buy and sell pump.fun tokens from local keypairs",
    )
    parser.add_argument("--env-file", help="Load environment variables from this file")
    parser.add_argument("--keys-folder", help="Directory holding account keypairs")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Log more (-v for info, -vv for debug)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    info = subparsers.add_parser("info", help="Show a token's bonding curve")
    info.add_argument("token_address", help="Token mint address")
    info.add_argument(
        "--global", dest="include_global", action="store_true",
        help="Also show the pump.fun global account",
    )

    buy = subparsers.add_parser("buy", help="Buy a token with SOL")
    buy.add_argument("token_address", help="Token mint address")
    buy.add_argument("buy_amount", type=float, help="SOL to spend")
    buy.add_argument("account_name", nargs="?", default="default")
    buy.add_argument(
        "slippage_basis_points", nargs="?", type=int,
        default=DEFAULT_SLIPPAGE_BASIS_POINTS,
    )

    sell = subparsers.add_parser("sell", help="Sell a token for SOL")
    sell.add_argument("token_address", help="Token mint address")
    sell.add_argument(
        "sell_amount", nargs="?", type=float, default=0,
        help="Tokens to sell, 0 sells everything",
    )
    sell.add_argument("account_name", nargs="?", default="default")
    sell.add_argument(
        "slippage_basis_points", nargs="?", type=int,
        default=DEFAULT_SLIPPAGE_BASIS_POINTS,
    )

    create = subparsers.add_parser("create", help="Create a token and buy some of it")
    create.add_argument("name")
    create.add_argument("symbol")
    create.add_argument("description")
    create.add_argument("initial_buy_amount", type=float, help="SOL to spend on the first buy")
    create.add_argument("account_name", nargs="?", default="default")
    create.add_argument("image_path", nargs="?", default=None)
    create.add_argument("--image", dest="image_option", help="Token image file")
    create.add_argument("--twitter")
    create.add_argument("--telegram")
    create.add_argument("--website")
    create.add_argument(
        "--slippage", type=int, default=DEFAULT_SLIPPAGE_BASIS_POINTS,
        help="Slippage in basis points",
    )

    subparsers.add_parser("accounts", help="List stored accounts")

    balance = subparsers.add_parser("balance", help="Show an account's balances")
    balance.add_argument("account_name", nargs="?", default="default")
    balance.add_argument("token_address", nargs="?", default=None)

    return parser


async def run_command(args: argparse.Namespace, settings: Settings) -> tuple[bool, str]:
    """Run the selected subcommand.

    Returns:
        (success, text to print)
    """
    if args.command == "accounts":
        result = list_accounts(KeypairStore(settings.keys_folder))
        return result.success, format_account_list(result)

    async with open_context(settings) as ctx:
        if args.command == "info":
            result = await get_token_info(ctx, args.token_address, args.include_global)
            text = format_token_info(result)
        elif args.command == "buy":
            result = await buy_token(
                ctx,
                args.token_address,
                args.buy_amount,
                args.account_name,
                args.slippage_basis_points,
            )
            text = format_buy_result(result)
        elif args.command == "sell":
            result = await sell_token(
                ctx,
                args.token_address,
                args.sell_amount,
                args.account_name,
                args.slippage_basis_points,
            )
            text = format_sell_result(result)
        elif args.command == "create":
            result = await create_token(
                ctx,
                args.name,
                args.symbol,
                args.description,
                args.initial_buy_amount,
                image_path=args.image_option or args.image_path,
                account_name=args.account_name,
                slippage_basis_points=args.slippage,
                twitter=args.twitter,
                telegram=args.telegram,
                website=args.website,
            )
            text = format_create_result(result)
        elif args.command == "balance":
            result = await get_account_balance(ctx, args.account_name, args.token_address)
            text = format_account_balance(result)
        else:
            raise ValueError(f"Unknown command: {args.command}")

    return result.success, text


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    setup_console_logging(level)
    if args.log_file:
        setup_file_logging(args.log_file, level=min(level, logging.INFO))

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("solana.rpc").setLevel(logging.WARNING)

    try:
        settings = load_settings(args.env_file, keys_folder=args.keys_folder)
        success, text = asyncio.run(run_command(args, settings))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    print(text)
    return 0 if success else 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
