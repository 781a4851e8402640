"""
Shared dependencies of the networked commands.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from config_loader import Settings
from core.client import SolanaClient
from core.keystore import KeypairStore
from interfaces.core import LaunchpadSDK
from platforms.pumpfun import PumpFunSDK
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CommandContext:
    """RPC client, launchpad SDK and keypair store used by one command run."""

    keystore: KeypairStore
    client: SolanaClient
    sdk: LaunchpadSDK

    async def close(self) -> None:
        await self.sdk.close()
        await self.client.close()


@asynccontextmanager
async def open_context(settings: Settings) -> AsyncIterator[CommandContext]:
    """Build a CommandContext from settings and close it on exit.

    Raises:
        ConfigurationError: If no RPC endpoint is configured
    """
    rpc_endpoint = settings.require_rpc()
    client = SolanaClient(rpc_endpoint, commitment=settings.commitment_level)
    sdk = PumpFunSDK(
        client,
        pumpportal_url=settings.pumpportal_url,
        ipfs_url=settings.ipfs_url,
    )
    context = CommandContext(KeypairStore(settings.keys_folder), client, sdk)
    logger.debug(f"Opened command context (keys folder {settings.keys_folder})")
    try:
        yield context
    finally:
        await context.close()
