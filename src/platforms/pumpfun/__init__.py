"""
Pump.Fun platform exports.
"""

from .address_provider import PumpFunAddresses, PumpFunAddressProvider
from .curve_manager import BondingCurveAccount, GlobalAccount, PumpFunCurveManager
from .sdk import PumpFunSDK

__all__ = [
    "BondingCurveAccount",
    "GlobalAccount",
    "PumpFunAddresses",
    "PumpFunAddressProvider",
    "PumpFunCurveManager",
    "PumpFunSDK",
]
