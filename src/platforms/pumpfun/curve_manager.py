"""
Pump.Fun bonding curve and global account readers.

Account layouts follow the pump.fun IDL: an 8-byte Anchor discriminator
followed by little-endian fields. Newer program versions append fields, so
the bonding curve is parsed progressively based on the available bytes.
"""

import struct
from dataclasses import dataclass
from typing import Final

from construct import Bytes, Flag, Int64ul, Struct
from solders.pubkey import Pubkey

from core.client import SolanaClient
from core.pubkeys import LAMPORTS_PER_SOL, TOKEN_DECIMALS
from platforms.pumpfun.address_provider import PumpFunAddressProvider
from utils.logger import get_logger

logger = get_logger(__name__)

BONDING_CURVE_DISCRIMINATOR: Final[bytes] = struct.pack("<Q", 6966180631402821399)
GLOBAL_DISCRIMINATOR: Final[bytes] = bytes([167, 232, 232, 177, 200, 108, 114, 127])


@dataclass
class BondingCurveAccount:
    """Parsed pump.fun bonding curve state (raw units)."""

    virtual_token_reserves: int
    virtual_sol_reserves: int
    real_token_reserves: int
    real_sol_reserves: int
    token_total_supply: int
    complete: bool
    creator: Pubkey | None = None
    is_mayhem_mode: bool = False

    _BASE_STRUCT = Struct(
        "virtual_token_reserves" / Int64ul,
        "virtual_sol_reserves" / Int64ul,
        "real_token_reserves" / Int64ul,
        "real_sol_reserves" / Int64ul,
        "token_total_supply" / Int64ul,
        "complete" / Flag,
    )

    @classmethod
    def from_bytes(cls, data: bytes) -> "BondingCurveAccount":
        """Parse bonding curve data progressively based on available bytes.

        Args:
            data: Raw account data including discriminator

        Raises:
            ValueError: If discriminator is invalid or data is too short
        """
        if len(data) < 8:
            raise ValueError("Data too short to contain discriminator")
        if data[:8] != BONDING_CURVE_DISCRIMINATOR:
            raise ValueError("Invalid curve state discriminator")

        offset = 8
        base_size = cls._BASE_STRUCT.sizeof()
        if len(data) < offset + base_size:
            raise ValueError("Data too short for bonding curve state")
        parsed = cls._BASE_STRUCT.parse(data[offset : offset + base_size])
        offset += base_size

        creator = None
        if len(data) >= offset + 32:
            creator = Pubkey.from_bytes(data[offset : offset + 32])
            offset += 32

        is_mayhem_mode = len(data) >= offset + 1 and bool(data[offset])

        return cls(
            virtual_token_reserves=parsed.virtual_token_reserves,
            virtual_sol_reserves=parsed.virtual_sol_reserves,
            real_token_reserves=parsed.real_token_reserves,
            real_sol_reserves=parsed.real_sol_reserves,
            token_total_supply=parsed.token_total_supply,
            complete=bool(parsed.complete),
            creator=creator,
            is_mayhem_mode=is_mayhem_mode,
        )

    @property
    def total_supply_decimal(self) -> float:
        return self.token_total_supply / 10**TOKEN_DECIMALS

    @property
    def real_sol_reserves_decimal(self) -> float:
        return self.real_sol_reserves / LAMPORTS_PER_SOL

    @property
    def virtual_sol_reserves_decimal(self) -> float:
        return self.virtual_sol_reserves / LAMPORTS_PER_SOL

    @property
    def virtual_token_reserves_decimal(self) -> float:
        return self.virtual_token_reserves / 10**TOKEN_DECIMALS

    @property
    def real_token_reserves_decimal(self) -> float:
        return self.real_token_reserves / 10**TOKEN_DECIMALS


@dataclass
class GlobalAccount:
    """Parsed pump.fun global configuration account."""

    initialized: bool
    authority: Pubkey
    fee_recipient: Pubkey
    initial_virtual_token_reserves: int
    initial_virtual_sol_reserves: int
    initial_real_token_reserves: int
    token_total_supply: int
    fee_basis_points: int

    _STRUCT = Struct(
        "initialized" / Flag,
        "authority" / Bytes(32),
        "fee_recipient" / Bytes(32),
        "initial_virtual_token_reserves" / Int64ul,
        "initial_virtual_sol_reserves" / Int64ul,
        "initial_real_token_reserves" / Int64ul,
        "token_total_supply" / Int64ul,
        "fee_basis_points" / Int64ul,
    )

    @classmethod
    def from_bytes(cls, data: bytes) -> "GlobalAccount":
        """Parse the global account.

        Raises:
            ValueError: If discriminator is invalid or data is too short
        """
        if len(data) < 8:
            raise ValueError("Account data too short")
        if data[:8] != GLOBAL_DISCRIMINATOR:
            raise ValueError(f"Invalid discriminator: {data[:8].hex()}")
        if len(data) < 8 + cls._STRUCT.sizeof():
            raise ValueError("Data too short for global account")

        parsed = cls._STRUCT.parse(data[8:])
        return cls(
            initialized=bool(parsed.initialized),
            authority=Pubkey.from_bytes(parsed.authority),
            fee_recipient=Pubkey.from_bytes(parsed.fee_recipient),
            initial_virtual_token_reserves=parsed.initial_virtual_token_reserves,
            initial_virtual_sol_reserves=parsed.initial_virtual_sol_reserves,
            initial_real_token_reserves=parsed.initial_real_token_reserves,
            token_total_supply=parsed.token_total_supply,
            fee_basis_points=parsed.fee_basis_points,
        )


class PumpFunCurveManager:
    """Reads pump.fun program accounts through the RPC client."""

    def __init__(
        self,
        client: SolanaClient,
        address_provider: PumpFunAddressProvider | None = None,
    ):
        self.client = client
        self.address_provider = address_provider or PumpFunAddressProvider()

    async def get_bonding_curve_account(
        self, mint: Pubkey
    ) -> BondingCurveAccount | None:
        """Get the bonding curve of ``mint``.

        Returns:
            Parsed state, or None if the curve account does not exist
        """
        curve_address = self.address_provider.derive_bonding_curve(mint)
        try:
            account = await self.client.get_account_info(curve_address)
        except ValueError:
            logger.info(f"No bonding curve account {curve_address} for mint {mint}")
            return None

        if not account.data:
            raise ValueError(f"No data in bonding curve account {curve_address}")
        return BondingCurveAccount.from_bytes(bytes(account.data))

    async def get_global_account(self) -> GlobalAccount:
        """Get the pump.fun global account.

        Raises:
            ValueError: If the account is missing or malformed
        """
        account = await self.client.get_account_info(
            self.address_provider.global_account
        )
        if not account.data:
            raise ValueError("No data in global account")
        return GlobalAccount.from_bytes(bytes(account.data))
