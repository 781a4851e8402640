"""Tests for the command line interface."""

from contextlib import asynccontextmanager

import pytest

import cli
from conftest import MINT, FakeClient, FakeSDK


@pytest.fixture(autouse=True)
def no_rpc(monkeypatch, tmp_path):
    for name in ("HELIUS_RPC_URL", "SOLANA_NODE_RPC_ENDPOINT", "KEYS_FOLDER", "SOLANA_COMMITMENT"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


def test_parser_defaults():
    parser = cli.build_parser()

    sell = parser.parse_args(["sell", MINT])
    assert (sell.sell_amount, sell.account_name, sell.slippage_basis_points) == (0, "default", 100)

    buy = parser.parse_args(["buy", MINT, "0.5", "trader", "250"])
    assert (buy.buy_amount, buy.account_name, buy.slippage_basis_points) == (0.5, "trader", 250)

    balance = parser.parse_args(["balance"])
    assert (balance.account_name, balance.token_address) == ("default", None)


def test_accounts_without_rpc(tmp_path, capsys):
    keys = tmp_path / "keys"

    exit_code = cli.main(["--keys-folder", str(keys), "accounts"])

    assert exit_code == 0
    assert capsys.readouterr().out.startswith("No accounts found. Keys folder created at")
    assert keys.is_dir()


def test_missing_rpc_exits_with_error(capsys):
    exit_code = cli.main(["buy", MINT, "0.01"])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert "HELIUS_RPC_URL environment variable is not set" in captured.err
    assert captured.out == ""


def test_buy_through_cli(monkeypatch, tmp_path, capsys, make_context):
    sdk = FakeSDK()
    ctx = make_context(FakeClient(sol_lamports=1_000_000_000, token_responses=[[], [99.0]]), sdk)

    @asynccontextmanager
    async def fake_open(settings):
        yield ctx

    monkeypatch.setattr(cli, "open_context", fake_open)
    monkeypatch.setenv("HELIUS_RPC_URL", "https://rpc.test")

    exit_code = cli.main(["buy", MINT, "0.02", "trader", "150"])

    assert exit_code == 0
    assert capsys.readouterr().out.startswith("Successfully bought token!")
    assert sdk.calls == [("buy", "trader", MINT, 0.02, 150)]


def test_failed_command_exit_code(monkeypatch, capsys, make_context):
    ctx = make_context(FakeClient(token_responses=[[]]))

    @asynccontextmanager
    async def fake_open(settings):
        yield ctx

    monkeypatch.setattr(cli, "open_context", fake_open)

    exit_code = cli.main(["sell", MINT])

    assert exit_code == 1
    assert capsys.readouterr().out.startswith("Error selling token: No tokens to sell.")
