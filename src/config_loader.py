"""
Runtime settings loaded from the environment and an optional .env file.

Settings are resolved once, at process start, and passed explicitly to the
components that need them.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from solana.rpc.commitment import Commitment

from core.exceptions import ConfigurationError
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_KEYS_FOLDER = ".keys"
DEFAULT_PUMPPORTAL_URL = "https://pumpportal.fun/api/trade-local"
DEFAULT_IPFS_URL = "https://pump.fun/api/ipfs"
VALID_COMMITMENTS = ("processed", "confirmed", "finalized")

RPC_ENV_VARS = ("HELIUS_RPC_URL", "SOLANA_NODE_RPC_ENDPOINT")


@dataclass(frozen=True)
class Settings:
    """Configuration shared by the CLI and the MCP server."""

    keys_folder: Path
    rpc_endpoint: str | None = None
    pumpportal_url: str = DEFAULT_PUMPPORTAL_URL
    ipfs_url: str = DEFAULT_IPFS_URL
    commitment: str = "confirmed"

    def require_rpc(self) -> str:
        """Return the RPC endpoint.

        Raises:
            ConfigurationError: If no endpoint is configured
        """
        if not self.rpc_endpoint:
            raise ConfigurationError(
                f"{RPC_ENV_VARS[0]} environment variable is not set"
            )
        return self.rpc_endpoint

    @property
    def commitment_level(self) -> Commitment:
        return Commitment(self.commitment)

    def with_overrides(self, **overrides) -> "Settings":
        """Copy with the given non-None fields replaced."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if "keys_folder" in values:
            values["keys_folder"] = Path(values["keys_folder"]).expanduser()
        return replace(self, **values)


def _first_env(names: tuple[str, ...]) -> str | None:
    for name in names:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    return None


def load_settings(env_file: str | Path | None = None, **overrides) -> Settings:
    """Load settings from the process environment.

    A ``.env`` file is read first (``env_file`` if given, otherwise the one
    found by searching up from the working directory). Variables already set
    in the environment win.

    Args:
        env_file: Optional path of a .env file
        **overrides: Field values that take precedence over the environment

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If an explicit env_file is missing or a value is invalid
    """
    if env_file is not None:
        env_path = Path(env_file)
        if not env_path.is_file():
            raise ConfigurationError(f"Env file not found: {env_path}")
        load_dotenv(env_path)
        logger.debug(f"Loaded environment from {env_path}")
    else:
        load_dotenv(find_dotenv(usecwd=True))

    commitment = os.getenv("SOLANA_COMMITMENT", "confirmed").strip().lower()
    if commitment not in VALID_COMMITMENTS:
        raise ConfigurationError(
            f"SOLANA_COMMITMENT must be one of {', '.join(VALID_COMMITMENTS)}, got {commitment!r}"
        )

    settings = Settings(
        keys_folder=Path(os.getenv("KEYS_FOLDER") or DEFAULT_KEYS_FOLDER).expanduser(),
        rpc_endpoint=_first_env(RPC_ENV_VARS),
        pumpportal_url=os.getenv("PUMPPORTAL_API_URL") or DEFAULT_PUMPPORTAL_URL,
        ipfs_url=os.getenv("PUMPFUN_IPFS_URL") or DEFAULT_IPFS_URL,
        commitment=commitment,
    )
    return settings.with_overrides(**overrides)
