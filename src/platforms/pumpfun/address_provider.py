"""
Pump.Fun program addresses and PDA derivations.
"""

from dataclasses import dataclass
from typing import Final

from solders.pubkey import Pubkey


@dataclass
class PumpFunAddresses:
    """Pump.fun program addresses."""

    PROGRAM: Final[Pubkey] = Pubkey.from_string(
        "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P"
    )
    GLOBAL: Final[Pubkey] = Pubkey.from_string(
        "4wTV1YmiEkRvAtNtsSGPtUrqRYQMe5SKy2uB4Jjaxnjf"
    )


class PumpFunAddressProvider:
    """PDA derivations for pump.fun accounts."""

    @property
    def global_account(self) -> Pubkey:
        return PumpFunAddresses.GLOBAL

    def derive_bonding_curve(self, mint: Pubkey) -> Pubkey:
        """Derive the bonding curve address of a mint.

        Args:
            mint: Token mint address

        Returns:
            Bonding curve PDA
        """
        bonding_curve, _ = Pubkey.find_program_address(
            [b"bonding-curve", bytes(mint)], PumpFunAddresses.PROGRAM
        )
        return bonding_curve
