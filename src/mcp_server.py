"""
MCP server exposing the pump.fun toolkit as tools over stdio.

Each tool returns a single text block with the same output as the matching
CLI subcommand. Logs go to stderr so they never mix with the protocol on
stdout.
"""

import asyncio
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

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
from commands.validation import DEFAULT_SLIPPAGE_BASIS_POINTS, MIN_SOL_AMOUNT
from config_loader import Settings, load_settings
from core.exceptions import ConfigurationError, ValidationError
from core.keystore import KeypairStore
from utils.logger import get_logger, setup_console_logging

logger = get_logger(__name__)

SERVER_NAME = "pumpfun"

app = Server(SERVER_NAME)

_settings: Settings | None = None

ERROR_PREFIXES = {
    "get-token-info": "Error getting token info",
    "create-token": "Error creating token",
    "buy-token": "Error buying token",
    "sell-token": "Error selling token",
    "list-accounts": "Error listing accounts",
    "get-account-balance": "Error getting account balance",
}

ACCOUNT_NAME_SCHEMA = {
    "type": "string",
    "default": "default",
    "description": "Name of the account to use (will be created if it doesn't exist)",
}
SLIPPAGE_SCHEMA = {
    "type": "integer",
    "minimum": 0,
    "default": DEFAULT_SLIPPAGE_BASIS_POINTS,
    "description": "Slippage tolerance in basis points (1% = 100)",
}


def get_settings() -> Settings:
    """Settings for tool calls, loaded from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


def _required(arguments: dict[str, Any], key: str) -> Any:
    value = arguments.get(key)
    if value is None:
        raise ValidationError(f"Missing required argument: {key}")
    return value


@app.list_tools()
async def list_tools() -> list[Tool]:
    return [
        Tool(
            name="get-token-info",
            description="Get information about a Pump.fun token",
            inputSchema={
                "type": "object",
                "properties": {
                    "tokenAddress": {
                        "type": "string",
                        "description": "The token's mint address",
                    },
                },
                "required": ["tokenAddress"],
            },
        ),
        Tool(
            name="create-token",
            description="Create a new Pump.fun token",
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Token name"},
                    "symbol": {"type": "string", "description": "Token symbol"},
                    "description": {"type": "string", "description": "Token description"},
                    "imageUrl": {
                        "type": "string",
                        "description": "Path to a local token image file (optional)",
                    },
                    "initialBuyAmount": {
                        "type": "number",
                        "minimum": MIN_SOL_AMOUNT,
                        "description": "Initial buy amount in SOL",
                    },
                    "accountName": ACCOUNT_NAME_SCHEMA,
                },
                "required": ["name", "symbol", "description", "initialBuyAmount"],
            },
        ),
        Tool(
            name="buy-token",
            description="Buy a Pump.fun token",
            inputSchema={
                "type": "object",
                "properties": {
                    "tokenAddress": {
                        "type": "string",
                        "description": "The token's mint address",
                    },
                    "buyAmount": {
                        "type": "number",
                        "minimum": MIN_SOL_AMOUNT,
                        "description": "Amount to buy in SOL",
                    },
                    "accountName": ACCOUNT_NAME_SCHEMA,
                    "slippageBasisPoints": SLIPPAGE_SCHEMA,
                },
                "required": ["tokenAddress", "buyAmount"],
            },
        ),
        Tool(
            name="sell-token",
            description="Sell a Pump.fun token",
            inputSchema={
                "type": "object",
                "properties": {
                    "tokenAddress": {
                        "type": "string",
                        "description": "The token's mint address",
                    },
                    "sellAmount": {
                        "type": "number",
                        "minimum": 0,
                        "description": "Amount of tokens to sell (0 for all)",
                    },
                    "accountName": ACCOUNT_NAME_SCHEMA,
                    "slippageBasisPoints": SLIPPAGE_SCHEMA,
                },
                "required": ["tokenAddress", "sellAmount"],
            },
        ),
        Tool(
            name="list-accounts",
            description="List all accounts in the keys folder",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="get-account-balance",
            description="Get the SOL and token balances for an account",
            inputSchema={
                "type": "object",
                "properties": {
                    "accountName": {
                        "type": "string",
                        "default": "default",
                        "description": "Name of the account to check",
                    },
                    "tokenAddress": {
                        "type": "string",
                        "description": "Optional token address to check balance for",
                    },
                },
            },
        ),
    ]


async def dispatch_tool(name: str, arguments: dict[str, Any], settings: Settings) -> str:
    """Run one tool call and return its text output.

    Raises:
        ConfigurationError: If the tool needs RPC access and none is configured
        ValidationError: If a required argument is missing
        ValueError: If the tool name is unknown
    """
    account_name = arguments.get("accountName") or "default"
    slippage = arguments.get("slippageBasisPoints", DEFAULT_SLIPPAGE_BASIS_POINTS)

    if name == "list-accounts":
        return format_account_list(list_accounts(KeypairStore(settings.keys_folder)))
    if name not in ERROR_PREFIXES:
        raise ValueError(f"Unknown tool: {name}")

    async with open_context(settings) as ctx:
        if name == "get-token-info":
            token_address = _required(arguments, "tokenAddress")
            logger.info(f"Checking token info for: {token_address}")
            return format_token_info(await get_token_info(ctx, token_address))

        if name == "buy-token":
            token_address = _required(arguments, "tokenAddress")
            buy_amount = _required(arguments, "buyAmount")
            logger.info(f"Buying token: {token_address}, amount: {buy_amount} SOL")
            result = await buy_token(ctx, token_address, buy_amount, account_name, slippage)
            return format_buy_result(result)

        if name == "sell-token":
            token_address = _required(arguments, "tokenAddress")
            sell_amount = _required(arguments, "sellAmount")
            logger.info(
                f"Selling token: {token_address}, amount: {'ALL' if sell_amount == 0 else sell_amount}"
            )
            result = await sell_token(ctx, token_address, sell_amount, account_name, slippage)
            return format_sell_result(result)

        if name == "create-token":
            result = await create_token(
                ctx,
                _required(arguments, "name"),
                _required(arguments, "symbol"),
                arguments.get("description") or "",
                _required(arguments, "initialBuyAmount"),
                image_path=arguments.get("imageUrl"),
                account_name=account_name,
                slippage_basis_points=slippage,
            )
            return format_create_result(result)

        result = await get_account_balance(ctx, account_name, arguments.get("tokenAddress"))
        return format_account_balance(result)


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> list[TextContent]:
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        return _text("Invalid arguments. Expected an object.")

    prefix = ERROR_PREFIXES.get(name, "Error")
    try:
        return _text(await dispatch_tool(name, arguments, get_settings()))
    except (ConfigurationError, ValidationError, ValueError) as e:
        logger.error(f"{prefix}: {e}")
        return _text(f"{prefix}: {e}")
    except Exception as e:
        logger.exception(f"{prefix}")
        return _text(f"{prefix}: {str(e) or 'Unknown error'}")


async def main() -> None:
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Pump Fun MCP Server running on stdio")
        await app.run(read_stream, write_stream, app.create_initialization_options())


def run() -> None:
    setup_console_logging()
    asyncio.run(main())


if __name__ == "__main__":
    run()
