"""
Core interfaces for the token launchpad SDK.

Commands depend only on these types. The pump.fun implementation lives in
``platforms.pumpfun``; tests substitute their own.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from core.pubkeys import LAMPORTS_PER_SOL
from core.wallet import Wallet


class Platform(Enum):
    """Supported launchpad platforms."""

    PUMP_FUN = "pump_fun"


@dataclass(frozen=True)
class PriorityFee:
    """Compute budget for a transaction."""

    unit_limit: int = 250_000
    unit_price: int = 250_000  # micro-lamports per compute unit

    @property
    def total_lamports(self) -> int:
        return self.unit_limit * self.unit_price // 1_000_000

    @property
    def total_sol(self) -> float:
        return self.total_lamports / LAMPORTS_PER_SOL


DEFAULT_PRIORITY_FEE = PriorityFee()


@dataclass
class TokenMetadata:
    """Metadata of a token to be created."""

    name: str
    symbol: str
    description: str
    image_path: Path | None = None
    twitter: str | None = None
    telegram: str | None = None
    website: str | None = None


@dataclass
class TradeResult:
    """Outcome of a transaction submitted by the SDK."""

    success: bool
    signature: str | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


class LaunchpadSDK(ABC):
    """Abstract interface of a launchpad trading SDK."""

    @property
    @abstractmethod
    def platform(self) -> Platform:
        """Get the platform this SDK trades on."""
        pass

    @abstractmethod
    async def get_bonding_curve_account(self, mint: Pubkey):
        """Get the bonding curve state of a token.

        Args:
            mint: Token mint address

        Returns:
            Parsed bonding curve account, or None if the token is unknown
        """
        pass

    @abstractmethod
    async def get_global_account(self):
        """Get the launchpad's global configuration account."""
        pass

    @abstractmethod
    async def buy(
        self,
        wallet: Wallet,
        mint: Pubkey,
        sol_amount: float,
        slippage_basis_points: int,
        priority_fee: PriorityFee = DEFAULT_PRIORITY_FEE,
    ) -> TradeResult:
        """Spend ``sol_amount`` SOL on ``mint``."""
        pass

    @abstractmethod
    async def sell(
        self,
        wallet: Wallet,
        mint: Pubkey,
        token_amount: float,
        slippage_basis_points: int,
        priority_fee: PriorityFee = DEFAULT_PRIORITY_FEE,
    ) -> TradeResult:
        """Sell ``token_amount`` tokens (UI units) of ``mint``."""
        pass

    @abstractmethod
    async def create_and_buy(
        self,
        wallet: Wallet,
        mint: Keypair,
        metadata: TokenMetadata,
        sol_amount: float,
        slippage_basis_points: int,
        priority_fee: PriorityFee = DEFAULT_PRIORITY_FEE,
    ) -> TradeResult:
        """Create a token with ``mint`` as its address and buy ``sol_amount`` SOL of it."""
        pass

    async def close(self) -> None:
        """Release network resources."""
        pass
