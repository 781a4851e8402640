"""
Exception hierarchy for the pump.fun toolkit.
"""


class PumpFunToolkitError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(PumpFunToolkitError):
    """Required configuration is missing or invalid."""


class ValidationError(PumpFunToolkitError, ValueError):
    """A user-supplied argument is malformed (address, amount, name)."""


class KeystoreError(PumpFunToolkitError):
    """Base class for keypair store failures."""


class KeystoreIOError(KeystoreError, OSError):
    """The keys folder or a key file could not be created or read."""


class CorruptKeyFileError(KeystoreError, ValueError):
    """A key file does not decode to a valid keypair."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Corrupt key file {path}: {reason}")


class AccountNotFoundError(KeystoreError, LookupError):
    """No key file exists for the requested account name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Account file not found for {name}")


class InsufficientFundsError(PumpFunToolkitError):
    """The account cannot cover the requested trade."""


class SDKError(PumpFunToolkitError):
    """The launchpad API or the transaction submission failed."""
