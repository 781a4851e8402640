"""
Pump.Fun implementation of the LaunchpadSDK interface.

Transactions are built by the PumpPortal local-transaction API, which returns
an unsigned serialized ``VersionedTransaction`` for a trade request. This
module only signs that transaction with the local keypair(s) and submits it
through the RPC client. Token metadata for new tokens is uploaded to the
pump.fun IPFS endpoint first.
"""

import asyncio
import mimetypes
from typing import Any

import aiohttp
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from core.client import SolanaClient
from core.exceptions import SDKError
from core.wallet import Wallet
from interfaces.core import (
    DEFAULT_PRIORITY_FEE,
    LaunchpadSDK,
    Platform,
    PriorityFee,
    TokenMetadata,
    TradeResult,
)
from platforms.pumpfun.curve_manager import (
    BondingCurveAccount,
    GlobalAccount,
    PumpFunCurveManager,
)
from utils.error_parser import parse_transaction_error
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PUMPPORTAL_URL = "https://pumpportal.fun/api/trade-local"
DEFAULT_IPFS_URL = "https://pump.fun/api/ipfs"
REQUEST_TIMEOUT_SECONDS = 30


class PumpFunSDK(LaunchpadSDK):
    """Pump.fun trading through PumpPortal-built transactions."""

    def __init__(
        self,
        client: SolanaClient,
        pumpportal_url: str = DEFAULT_PUMPPORTAL_URL,
        ipfs_url: str = DEFAULT_IPFS_URL,
        session: aiohttp.ClientSession | None = None,
        pool: str = "pump",
    ):
        """Initialize the SDK.

        Args:
            client: Solana RPC client used for reads and submission
            pumpportal_url: PumpPortal trade-local endpoint
            ipfs_url: pump.fun metadata upload endpoint
            session: Optional HTTP session; one is created on demand otherwise
            pool: PumpPortal pool name
        """
        self.client = client
        self.pumpportal_url = pumpportal_url
        self.ipfs_url = ipfs_url
        self.pool = pool
        self.curve_manager = PumpFunCurveManager(client)
        self._session = session
        self._owns_session = session is None

    @property
    def platform(self) -> Platform:
        return Platform.PUMP_FUN

    async def close(self) -> None:
        if self._session and self._owns_session:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def get_bonding_curve_account(
        self, mint: Pubkey
    ) -> BondingCurveAccount | None:
        return await self.curve_manager.get_bonding_curve_account(mint)

    async def get_global_account(self) -> GlobalAccount:
        return await self.curve_manager.get_global_account()

    async def buy(
        self,
        wallet: Wallet,
        mint: Pubkey,
        sol_amount: float,
        slippage_basis_points: int,
        priority_fee: PriorityFee = DEFAULT_PRIORITY_FEE,
    ) -> TradeResult:
        payload = self.build_trade_payload(
            wallet.pubkey,
            "buy",
            mint,
            amount=sol_amount,
            denominated_in_sol=True,
            slippage_basis_points=slippage_basis_points,
            priority_fee=priority_fee,
        )
        return await self._execute(payload, [wallet.keypair])

    async def sell(
        self,
        wallet: Wallet,
        mint: Pubkey,
        token_amount: float,
        slippage_basis_points: int,
        priority_fee: PriorityFee = DEFAULT_PRIORITY_FEE,
    ) -> TradeResult:
        payload = self.build_trade_payload(
            wallet.pubkey,
            "sell",
            mint,
            amount=token_amount,
            denominated_in_sol=False,
            slippage_basis_points=slippage_basis_points,
            priority_fee=priority_fee,
        )
        return await self._execute(payload, [wallet.keypair])

    async def create_and_buy(
        self,
        wallet: Wallet,
        mint: Keypair,
        metadata: TokenMetadata,
        sol_amount: float,
        slippage_basis_points: int,
        priority_fee: PriorityFee = DEFAULT_PRIORITY_FEE,
    ) -> TradeResult:
        try:
            metadata_uri = await self.upload_metadata(metadata)
        except (SDKError, aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            logger.error(f"Metadata upload failed: {e}")
            return TradeResult(False, error=f"Metadata upload failed: {e}")

        payload = self.build_trade_payload(
            wallet.pubkey,
            "create",
            mint.pubkey(),
            amount=sol_amount,
            denominated_in_sol=True,
            slippage_basis_points=slippage_basis_points,
            priority_fee=priority_fee,
        )
        payload["tokenMetadata"] = {
            "name": metadata.name,
            "symbol": metadata.symbol,
            "uri": metadata_uri,
        }
        result = await self._execute(payload, [mint, wallet.keypair])
        result.extra["metadata_uri"] = metadata_uri
        return result

    def build_trade_payload(
        self,
        public_key: Pubkey,
        action: str,
        mint: Pubkey,
        amount: float,
        denominated_in_sol: bool,
        slippage_basis_points: int,
        priority_fee: PriorityFee,
    ) -> dict[str, Any]:
        """Build a PumpPortal trade-local request body.

        PumpPortal takes slippage in percent and the priority fee in SOL.
        """
        return {
            "publicKey": str(public_key),
            "action": action,
            "mint": str(mint),
            "amount": amount,
            "denominatedInSol": "true" if denominated_in_sol else "false",
            "slippage": slippage_basis_points / 100,
            "priorityFee": priority_fee.total_sol,
            "pool": self.pool,
        }

    async def upload_metadata(self, metadata: TokenMetadata) -> str:
        """Upload token metadata (and image, if any) to pump.fun IPFS.

        Returns:
            The metadata URI to put on chain

        Raises:
            SDKError: If the upload is rejected
        """
        form_data = aiohttp.FormData()
        if metadata.image_path is not None:
            content_type = (
                mimetypes.guess_type(str(metadata.image_path))[0] or "image/png"
            )
            form_data.add_field(
                "file",
                metadata.image_path.read_bytes(),
                filename=metadata.image_path.name,
                content_type=content_type,
            )
        form_data.add_field("name", metadata.name)
        form_data.add_field("symbol", metadata.symbol)
        form_data.add_field("description", metadata.description)
        form_data.add_field("showName", "true")
        for key in ("twitter", "telegram", "website"):
            value = getattr(metadata, key)
            if value:
                form_data.add_field(key, value)

        session = self._get_session()
        async with session.post(
            self.ipfs_url,
            data=form_data,
            timeout=aiohttp.ClientTimeout(REQUEST_TIMEOUT_SECONDS),
        ) as response:
            if response.status != 200:
                text = await response.text()
                raise SDKError(f"IPFS upload HTTP {response.status}: {text[:300]}")
            result = await response.json()

        metadata_uri = result.get("metadataUri") if isinstance(result, dict) else None
        if not metadata_uri:
            raise SDKError(f"IPFS upload response missing metadataUri: {result}")
        logger.info(f"Uploaded token metadata: {metadata_uri}")
        return metadata_uri

    @retry(
        reraise=True,
        wait=wait_fixed(1),
        stop=stop_after_attempt(3),
        retry=retry_if_exception_type((aiohttp.ClientConnectionError, asyncio.TimeoutError)),
    )
    async def _request_transaction(self, payload: dict[str, Any]) -> bytes:
        """Ask PumpPortal for the serialized transaction of a trade."""
        session = self._get_session()
        async with session.post(
            self.pumpportal_url,
            json=payload,
            timeout=aiohttp.ClientTimeout(REQUEST_TIMEOUT_SECONDS),
        ) as response:
            if response.status != 200:
                text = await response.text()
                raise SDKError(f"PumpPortal HTTP {response.status}: {text[:300]}")
            return await response.read()

    async def _execute(
        self, payload: dict[str, Any], signers: list[Keypair]
    ) -> TradeResult:
        """Request, sign, submit and confirm a transaction."""
        action = payload["action"]
        logger.info(
            f"Requesting {action} transaction for {payload['mint']} "
            f"(amount={payload['amount']}, slippage={payload['slippage']}%)"
        )
        try:
            tx_bytes = await self._request_transaction(payload)
        except (SDKError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to get {action} transaction: {e}")
            return TradeResult(False, error=str(e) or e.__class__.__name__)

        try:
            unsigned = VersionedTransaction.from_bytes(tx_bytes)
            transaction = VersionedTransaction(unsigned.message, signers)
        except Exception as e:
            logger.error(f"Could not sign {action} transaction: {e}")
            return TradeResult(False, error=f"Invalid transaction from PumpPortal: {e}")

        try:
            signature = await self.client.send_versioned_transaction(transaction)
        except Exception as e:
            parsed = parse_transaction_error(str(e))
            logger.error(f"Failed to send {action} transaction: {parsed.describe()}")
            return TradeResult(False, error=parsed.describe())

        try:
            success, error_string = await self.client.confirm_transaction(signature)
        except Exception as e:
            logger.error(f"Could not confirm {action} transaction {signature}: {e}")
            return TradeResult(
                False,
                signature=str(signature),
                error=f"Transaction sent but not confirmed: {e}",
            )
        if not success:
            parsed = parse_transaction_error(error_string)
            logger.error(f"{action} transaction {signature} failed: {parsed.describe()}")
            return TradeResult(
                False,
                signature=str(signature),
                error=parsed.describe(),
                extra={"is_slippage": parsed.is_slippage},
            )

        logger.info(f"{action} transaction confirmed: {signature}")
        return TradeResult(True, signature=str(signature))
