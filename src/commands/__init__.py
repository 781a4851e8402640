"""
Command operations shared by the CLI and the MCP server.
"""

from commands.accounts import (
    format_account_balance,
    format_account_list,
    get_account_balance,
    list_accounts,
)
from commands.context import CommandContext, open_context
from commands.creator import create_token, format_create_result
from commands.results import CommandFailure, ErrorKind
from commands.token_info import format_token_info, get_token_info
from commands.trading import buy_token, format_buy_result, format_sell_result, sell_token

__all__ = [
    "CommandContext",
    "CommandFailure",
    "ErrorKind",
    "buy_token",
    "create_token",
    "format_account_balance",
    "format_account_list",
    "format_buy_result",
    "format_create_result",
    "format_sell_result",
    "format_token_info",
    "get_account_balance",
    "get_token_info",
    "list_accounts",
    "open_context",
    "sell_token",
]
