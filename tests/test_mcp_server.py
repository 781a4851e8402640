"""Tests for MCP tool listing and dispatch."""

from contextlib import asynccontextmanager

import pytest

import mcp_server
from config_loader import Settings
from conftest import MINT, FakeClient, FakeSDK


@pytest.fixture
def settings(keys_folder, monkeypatch):
    settings = Settings(keys_folder=keys_folder)
    monkeypatch.setattr(mcp_server, "_settings", settings)
    return settings


@pytest.fixture
def fake_context(monkeypatch, make_context):
    """Route tool calls to a context built from fakes."""
    holder = {}

    def install(client=None, sdk=None):
        ctx = make_context(client, sdk)
        holder["ctx"] = ctx

        @asynccontextmanager
        async def _open(settings):
            yield ctx

        monkeypatch.setattr(mcp_server, "open_context", _open)
        return ctx

    return install


async def test_lists_six_tools():
    tools = await mcp_server.list_tools()

    assert [tool.name for tool in tools] == [
        "get-token-info",
        "create-token",
        "buy-token",
        "sell-token",
        "list-accounts",
        "get-account-balance",
    ]
    buy = next(tool for tool in tools if tool.name == "buy-token")
    assert buy.inputSchema["properties"]["accountName"]["default"] == "default"
    assert buy.inputSchema["properties"]["slippageBasisPoints"]["default"] == 100
    assert buy.inputSchema["properties"]["buyAmount"]["minimum"] == 0.0001


async def test_list_accounts_needs_no_rpc(settings):
    content = await mcp_server.call_tool("list-accounts", {})

    assert content[0].type == "text"
    assert content[0].text.startswith("No accounts found. Keys folder created at")


async def test_missing_rpc_is_reported_as_text(settings):
    content = await mcp_server.call_tool("buy-token", {"tokenAddress": MINT, "buyAmount": 0.01})

    assert content[0].text == "Error buying token: HELIUS_RPC_URL environment variable is not set"


async def test_buy_uses_defaults(settings, fake_context):
    sdk = FakeSDK()
    fake_context(FakeClient(sol_lamports=1_000_000_000, token_responses=[[], [10.0]]), sdk)

    content = await mcp_server.call_tool("buy-token", {"tokenAddress": MINT, "buyAmount": 0.01})

    assert content[0].text.startswith("Successfully bought token!")
    assert sdk.calls == [("buy", "default", MINT, 0.01, 100)]


async def test_sell_with_explicit_arguments(settings, fake_context):
    sdk = FakeSDK()
    fake_context(FakeClient(sol_lamports=1_000_000_000, token_responses=[[50.0], [0.0]]), sdk)

    content = await mcp_server.call_tool(
        "sell-token",
        {"tokenAddress": MINT, "sellAmount": 0, "accountName": "trader", "slippageBasisPoints": 300},
    )

    assert content[0].text.startswith("Successfully sold token!")
    assert sdk.calls == [("sell", "trader", MINT, 50.0, 300)]


async def test_missing_required_argument(settings, fake_context):
    fake_context()

    content = await mcp_server.call_tool("get-token-info", {})

    assert content[0].text == "Error getting token info: Missing required argument: tokenAddress"


async def test_account_balance_tool(settings, fake_context, keystore):
    keystore.get_or_create("default")
    fake_context(FakeClient(sol_lamports=2_000_000_000))

    content = await mcp_server.call_tool("get-account-balance", {})

    assert "SOL Balance: 2 SOL" in content[0].text


async def test_unknown_tool(settings):
    content = await mcp_server.call_tool("launch-rocket", {})
    assert content[0].text == "Error: Unknown tool: launch-rocket"


async def test_non_object_arguments(settings):
    content = await mcp_server.call_tool("list-accounts", ["not", "a", "dict"])
    assert content[0].text == "Invalid arguments. Expected an object."
