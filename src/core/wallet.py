"""
Named Solana identity backed by a key file.
"""

from solders.keypair import Keypair
from solders.pubkey import Pubkey


class Wallet:
    """A named keypair loaded from (or created in) the keypair store."""

    def __init__(self, name: str, keypair: Keypair):
        """Initialize wallet.

        Args:
            name: Account name, the key file stem
            keypair: Keypair for signing transactions
        """
        self._name = name
        self._keypair = keypair

    @property
    def name(self) -> str:
        """Get the account name."""
        return self._name

    @property
    def pubkey(self) -> Pubkey:
        """Get the public key of the wallet."""
        return self._keypair.pubkey()

    @property
    def keypair(self) -> Keypair:
        """Get the keypair for signing transactions."""
        return self._keypair

    def __repr__(self) -> str:
        return f"Wallet(name={self._name!r}, pubkey={self.pubkey})"
