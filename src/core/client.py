"""
Solana client abstraction for blockchain operations.
"""

import logging
from typing import Any

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment, Confirmed, Processed
from solana.rpc.core import UnconfirmedTxError
from solana.rpc.types import TokenAccountOpts, TxOpts
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction
from tenacity import (
    after_log,
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from utils.logger import get_logger

logger = get_logger(__name__)


class SolanaClient:
    """Abstraction for Solana RPC client operations."""

    def __init__(self, rpc_endpoint: str, commitment: Commitment = Confirmed):
        """Initialize Solana client.

        Args:
            rpc_endpoint: URL of the Solana RPC endpoint
            commitment: Commitment level used for reads and confirmations
        """
        self.rpc_endpoint = rpc_endpoint
        self.commitment = commitment
        self._client: AsyncClient | None = None

    async def __aenter__(self) -> "SolanaClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def get_client(self) -> AsyncClient:
        """Get or create the AsyncClient instance.

        Returns:
            AsyncClient instance
        """
        if self._client is None:
            self._client = AsyncClient(self.rpc_endpoint, commitment=self.commitment)
        return self._client

    async def close(self):
        """Close the client connection."""
        if self._client:
            await self._client.close()
            self._client = None

    async def get_account_info(self, pubkey: Pubkey):
        """Get account info from the blockchain.

        Args:
            pubkey: Public key of the account

        Returns:
            Account info response

        Raises:
            ValueError: If account doesn't exist or has no data
        """
        client = await self.get_client()
        response = await client.get_account_info(
            pubkey, encoding="base64"
        )  # base64 encoding for account data by default
        if not response.value:
            raise ValueError(f"Account {pubkey} not found")
        return response.value

    async def get_sol_balance(self, pubkey: Pubkey) -> int:
        """Get SOL balance for a wallet account.

        Args:
            pubkey: Public key of the wallet

        Returns:
            SOL balance in lamports
        """
        client = await self.get_client()
        response = await client.get_balance(pubkey)
        return response.value

    async def get_parsed_token_accounts(
        self, owner: Pubkey, mint: Pubkey
    ) -> list[Any]:
        """Get the token accounts of ``owner`` for one mint, jsonParsed.

        Args:
            owner: Wallet that owns the token accounts
            mint: Token mint to filter on

        Returns:
            Keyed accounts in the order returned by the node
        """
        client = await self.get_client()
        response = await client.get_token_accounts_by_owner_json_parsed(
            owner, TokenAccountOpts(mint=mint)
        )
        return list(response.value)

    async def send_versioned_transaction(
        self, transaction: VersionedTransaction, skip_preflight: bool = False
    ) -> Signature:
        """Submit an already signed transaction.

        Args:
            transaction: Fully signed versioned transaction
            skip_preflight: Whether to skip the preflight simulation

        Returns:
            Transaction signature
        """
        client = await self.get_client()
        tx_opts = TxOpts(skip_preflight=skip_preflight, preflight_commitment=Processed)
        response = await client.send_transaction(transaction, opts=tx_opts)
        logger.info(f"Transaction sent: {response.value}")
        return response.value

    async def confirm_transaction(
        self, signature: Signature, commitment: Commitment | None = None
    ) -> tuple[bool, str | None]:
        """Wait for transaction confirmation and extract error details if any.

        Args:
            signature: Transaction signature to confirm.
            commitment: Confirmation commitment level, defaults to the client's

        Returns:
            Tuple of (success, error string). The error string includes the
            transaction log messages when they can be fetched.
        """
        client = await self.get_client()
        commitment = commitment or self.commitment

        resp = await client.confirm_transaction(
            signature, commitment=commitment, sleep_seconds=1
        )

        status = resp.value[0] if resp.value else None
        if status is None:
            return False, f"No confirmation status for {signature}"
        if not status.err:
            return True, None

        error_string = str(status.err)
        try:
            tx = await self.get_transaction(signature)
            meta = tx.transaction.meta if tx and tx.transaction else None
            if meta and meta.log_messages:
                error_string = f"{error_string}\n" + "\n".join(meta.log_messages)
        except Exception as e:
            logging.info(
                "client.confirm_transaction - got exception while getting transaction details: %s",
                e,
            )
        return False, error_string

    @retry(
        reraise=True,
        wait=wait_fixed(2),
        stop=stop_after_attempt(5),
        retry=retry_if_not_exception_type(UnconfirmedTxError),
        after=after_log(logging.getLogger(), logging.INFO),
    )
    async def get_transaction(self, signature: str | Signature):
        """Fetch a transaction by signature.

        Args:
            signature: Transaction signature (string or Signature object)

        Returns:
            Transaction with status meta, or None if the node does not know it
        """
        client = await self.get_client()
        if isinstance(signature, str):
            signature = Signature.from_string(signature)
        resp = await client.get_transaction(
            signature,
            encoding="jsonParsed",
            max_supported_transaction_version=0,
            commitment=Confirmed,
        )
        return resp.value
