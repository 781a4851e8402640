"""Shared fakes for the command, balance and SDK tests."""

from types import SimpleNamespace

import pytest
from solders.signature import Signature

from commands.context import CommandContext
from core.keystore import KeypairStore
from interfaces.core import DEFAULT_PRIORITY_FEE, LaunchpadSDK, Platform, TradeResult

MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


def keyed_token_account(ui_amount, ui_amount_string=None):
    """A jsonParsed token account as returned by getTokenAccountsByOwner."""
    token_amount = {
        "uiAmount": ui_amount,
        "uiAmountString": ui_amount_string if ui_amount_string is not None else str(ui_amount),
        "decimals": 6,
    }
    parsed = {"info": {"tokenAmount": token_amount}, "type": "account"}
    return SimpleNamespace(
        pubkey="TokenAccount",
        account=SimpleNamespace(data=SimpleNamespace(parsed=parsed)),
    )


def _next(values):
    """Pop the next scripted value; the last one repeats."""
    if len(values) > 1:
        return values.pop(0)
    return values[0]


class FakeClient:
    """Stand-in for SolanaClient with scripted responses.

    ``sol_lamports`` and ``token_responses`` are consumed in call order.
    A token response is a list of UI amounts (one per token account) or an
    exception to raise.
    """

    def __init__(self, sol_lamports=0, token_responses=None, account_infos=None):
        self.sol_lamports = list(sol_lamports) if isinstance(sol_lamports, list) else [sol_lamports]
        self.token_responses = token_responses if token_responses is not None else [[]]
        self.account_infos = account_infos or {}
        self.token_queries = []
        self.sent = []
        self.confirm_result = (True, None)
        self.send_error = None
        self.closed = False

    async def get_sol_balance(self, pubkey):
        return _next(self.sol_lamports)

    async def get_parsed_token_accounts(self, owner, mint):
        self.token_queries.append((owner, mint))
        response = _next(self.token_responses)
        if isinstance(response, Exception):
            raise response
        return [keyed_token_account(amount) for amount in response]

    async def get_account_info(self, pubkey):
        if pubkey not in self.account_infos:
            raise ValueError(f"Account {pubkey} not found")
        return self.account_infos[pubkey]

    async def send_versioned_transaction(self, transaction, skip_preflight=False):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(transaction)
        return Signature.default()

    async def confirm_transaction(self, signature, commitment=None):
        return self.confirm_result

    async def close(self):
        self.closed = True


class FakeSDK(LaunchpadSDK):
    """Records trade calls and returns a fixed TradeResult."""

    def __init__(self, result=None, curve=None, global_account=None):
        self.result = result or TradeResult(True, signature="FakeSignature111")
        self.curve = curve
        self.global_account = global_account
        self.calls = []
        self.closed = False

    @property
    def platform(self):
        return Platform.PUMP_FUN

    async def get_bonding_curve_account(self, mint):
        self.calls.append(("curve", mint))
        return self.curve

    async def get_global_account(self):
        return self.global_account

    async def buy(self, wallet, mint, sol_amount, slippage_basis_points, priority_fee=DEFAULT_PRIORITY_FEE):
        self.calls.append(("buy", wallet.name, str(mint), sol_amount, slippage_basis_points))
        return self.result

    async def sell(self, wallet, mint, token_amount, slippage_basis_points, priority_fee=DEFAULT_PRIORITY_FEE):
        self.calls.append(("sell", wallet.name, str(mint), token_amount, slippage_basis_points))
        return self.result

    async def create_and_buy(
        self, wallet, mint, metadata, sol_amount, slippage_basis_points, priority_fee=DEFAULT_PRIORITY_FEE
    ):
        self.calls.append(("create", wallet.name, mint, metadata, sol_amount, slippage_basis_points))
        return self.result

    async def close(self):
        self.closed = True


@pytest.fixture
def keys_folder(tmp_path):
    return tmp_path / "keys"


@pytest.fixture
def keystore(keys_folder):
    return KeypairStore(keys_folder)


@pytest.fixture
def make_context(keystore):
    def _make(client=None, sdk=None):
        return CommandContext(keystore, client or FakeClient(), sdk or FakeSDK())

    return _make
