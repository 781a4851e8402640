"""
Error parsing utilities for Solana transaction errors.

Turns raw transaction error strings such as
``InstructionError((3, Tagged(Custom(InstructionErrorCustom(6002)))))`` into a
readable message using the pump.fun program's custom error table.
"""

import re
from dataclasses import dataclass

from interfaces.core import Platform
from utils.logger import get_logger

logger = get_logger(__name__)

# Custom error codes from the pump.fun program IDL
PUMP_FUN_ERRORS: dict[int, tuple[str, str]] = {
    6000: ("NotAuthorized", "The given account is not authorized to execute this instruction."),
    6001: ("AlreadyInitialized", "The program is already initialized."),
    6002: ("TooMuchSolRequired", "slippage: Too much SOL required to buy the given amount of tokens."),
    6003: ("TooLittleSolReceived", "slippage: Too little SOL received to sell the given amount of tokens."),
    6004: ("MintDoesNotMatchBondingCurve", "The mint does not match the bonding curve."),
    6005: ("BondingCurveComplete", "The bonding curve has completed and liquidity migrated to raydium."),
    6006: ("BondingCurveNotComplete", "The bonding curve has not completed."),
    6007: ("NotInitialized", "The program is not initialized."),
    6008: ("WithdrawTooFrequent", "Withdraw too frequent"),
}

SLIPPAGE_ERROR_CODES = {6002, 6003}


@dataclass
class ParsedError:
    """Parsed error information from a transaction error string."""

    code: int | None = None  # Error code (e.g., 6002)
    name: str | None = None  # Error name (e.g., "TooMuchSolRequired")
    message: str | None = None  # Error message
    is_slippage: bool = False  # Whether this is a slippage error
    platform: Platform | None = None  # Platform this error is associated with

    def describe(self) -> str:
        """One-line human readable description."""
        if self.name:
            return f"{self.name} ({self.code}): {self.message}"
        return self.message or "Unknown error"


class ErrorParser:
    """Parser for Solana transaction errors using known program error definitions."""

    def __init__(self, error_definitions: dict[int, tuple[str, str]] | None = None):
        self._error_definitions = (
            PUMP_FUN_ERRORS if error_definitions is None else error_definitions
        )

    def _extract_error_code(self, error_string: str) -> int | None:
        """Extract error code from error string.

        Examples:
            "InstructionError((3, Tagged(Custom(InstructionErrorCustom(6002)))))"
            -> 6002
            "Custom(6002)"
            -> 6002
            "custom program error: 0x1772"
            -> 6002
        """
        if not error_string:
            return None

        patterns = [
            r"InstructionErrorCustom\((\d+)\)",
            r"Custom\((\d+)\)",
            r"\"Custom\":\s*(\d+)",
        ]
        for pattern in patterns:
            match = re.search(pattern, error_string)
            if match:
                return int(match.group(1))

        match = re.search(r"custom program error: 0x([0-9a-fA-F]+)", error_string)
        if match:
            return int(match.group(1), 16)

        return None

    def parse_error(self, error_string: str | None) -> ParsedError:
        """Parse error string and classify error type.

        Args:
            error_string: Error string from transaction (can be None)

        Returns:
            ParsedError with error information and classification
        """
        if not error_string:
            return ParsedError()

        error_code = self._extract_error_code(error_string)
        if error_code is None:
            return ParsedError(message=error_string)

        error_def = self._error_definitions.get(error_code)
        if not error_def:
            return ParsedError(code=error_code, message=error_string)

        name, message = error_def
        logger.debug(f"Decoded program error {error_code} as {name}")
        return ParsedError(
            code=error_code,
            name=name,
            message=message,
            is_slippage=error_code in SLIPPAGE_ERROR_CODES,
            platform=Platform.PUMP_FUN,
        )


# Global error parser instance
_error_parser: ErrorParser | None = None


def get_error_parser() -> ErrorParser:
    """Get or create the global error parser instance."""
    global _error_parser
    if _error_parser is None:
        _error_parser = ErrorParser()
    return _error_parser


def parse_transaction_error(error_string: str | None) -> ParsedError:
    """Parse a transaction error string with the global error parser."""
    return get_error_parser().parse_error(error_string)
