"""
Filesystem-backed store of named Solana keypairs.

Every account lives in ``<keys_folder>/<name>.json`` as a JSON array of the
64 secret-key bytes (the same layout the Solana CLI uses). Keypairs of tokens
minted by this toolkit are kept next to them as ``mint-<pubkey>.json`` and are
never listed as accounts.
"""

import contextlib
import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from solders.keypair import Keypair

from core.exceptions import (
    AccountNotFoundError,
    CorruptKeyFileError,
    KeystoreError,
    KeystoreIOError,
    ValidationError,
)
from core.wallet import Wallet
from utils.logger import get_logger

logger = get_logger(__name__)

KEY_FILE_SUFFIX = ".json"
MINT_FILE_PREFIX = "mint-"
KEYPAIR_ERROR_MARKER = "Error reading keypair"
SECRET_KEY_LENGTH = 64


@dataclass(frozen=True)
class AccountEntry:
    """One row of the account listing."""

    name: str
    public_key: str  # base58 pubkey, or KEYPAIR_ERROR_MARKER


def validate_account_name(name: str) -> str:
    """Check that an account name maps to a single file inside the keys folder.

    Raises:
        ValidationError: If the name is empty, contains path separators,
            starts with a dot or uses the reserved mint prefix
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Account name must be a non-empty string")
    name = name.strip()
    if "/" in name or "\\" in name or name.startswith("."):
        raise ValidationError(f"Invalid account name: {name!r}")
    if name.startswith(MINT_FILE_PREFIX):
        raise ValidationError(
            f"Account names may not start with the reserved prefix {MINT_FILE_PREFIX!r}"
        )
    return name


def decode_keypair(raw: bytes | str, path: Path | str = "<memory>") -> Keypair:
    """Rebuild a keypair from the contents of a key file.

    Args:
        raw: File contents, a JSON array of 64 byte values
        path: File path, only used in error messages

    Returns:
        Keypair whose public half matches the one derived from the secret seed

    Raises:
        CorruptKeyFileError: If the contents do not decode to a valid keypair
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        raise CorruptKeyFileError(path, f"not valid JSON ({e})") from e

    if not isinstance(data, list) or len(data) != SECRET_KEY_LENGTH:
        raise CorruptKeyFileError(
            path, f"expected an array of {SECRET_KEY_LENGTH} bytes"
        )
    if not all(
        isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255
        for b in data
    ):
        raise CorruptKeyFileError(path, "array contains values outside 0..255")

    secret = bytes(data)
    try:
        keypair = Keypair.from_bytes(secret)
    except ValueError as e:
        raise CorruptKeyFileError(path, str(e)) from e

    # from_bytes trusts the stored public half, so re-derive it from the seed
    if Keypair.from_seed(secret[:32]).pubkey() != keypair.pubkey():
        raise CorruptKeyFileError(path, "public key does not match secret key")

    return keypair


class KeypairStore:
    """Get-or-create access to named keypairs in a keys folder."""

    def __init__(self, keys_folder: Path | str):
        """Initialize the store.

        Args:
            keys_folder: Directory holding the key files. It is created lazily.
        """
        self.keys_folder = Path(keys_folder)

    def account_path(self, name: str) -> Path:
        return self.keys_folder / f"{name}{KEY_FILE_SUFFIX}"

    def mint_path(self, keypair: Keypair) -> Path:
        return self.keys_folder / f"{MINT_FILE_PREFIX}{keypair.pubkey()}{KEY_FILE_SUFFIX}"

    def exists(self) -> bool:
        return self.keys_folder.is_dir()

    def ensure_directory(self) -> Path:
        """Create the keys folder and its parents if absent.

        Returns:
            The keys folder path

        Raises:
            KeystoreIOError: If the folder cannot be created
        """
        try:
            self.keys_folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Error creating keys folder {self.keys_folder}: {e}")
            raise KeystoreIOError(f"Error creating keys folder {self.keys_folder}: {e.strerror or e}") from e
        return self.keys_folder

    def get_or_create(self, name: str) -> Wallet:
        """Load the keypair for ``name``, generating and persisting it on first use.

        Concurrent calls for the same new name all return the same identity:
        the key file is published with an exclusive hard link, and a writer
        that loses the race reads the winner's file instead.

        Raises:
            ValidationError: If the account name is invalid
            KeystoreIOError: If the folder or file cannot be written
            CorruptKeyFileError: If an existing file is unreadable as a key
        """
        name = validate_account_name(name)
        self.ensure_directory()
        path = self.account_path(name)

        if path.exists():
            return Wallet(name, self._read_keypair(path))

        keypair = Keypair()
        if self._publish(path, keypair):
            logger.info(f"Created new account '{name}': {keypair.pubkey()}")
            return Wallet(name, keypair)

        logger.info(f"Account '{name}' was created concurrently, loading it")
        return Wallet(name, self._read_keypair(path))

    def load(self, name: str) -> Wallet:
        """Load an existing account without creating it.

        Raises:
            AccountNotFoundError: If there is no key file for ``name``
            CorruptKeyFileError: If the key file is unreadable as a key
        """
        name = validate_account_name(name)
        path = self.account_path(name)
        if not path.is_file():
            raise AccountNotFoundError(name)
        return Wallet(name, self._read_keypair(path))

    def save_mint_keypair(self, keypair: Keypair) -> Path:
        """Persist the keypair of a freshly created token mint.

        Returns:
            Path of the written ``mint-<pubkey>.json`` file
        """
        self.ensure_directory()
        path = self.mint_path(keypair)
        if not self._publish(path, keypair):
            raise KeystoreIOError(f"Mint key file already exists: {path}")
        logger.info(f"Saved mint keypair to {path}")
        return path

    def list_accounts(self) -> list[AccountEntry]:
        """List account identities in directory order.

        A missing folder is created and reported as empty. Mint key files and
        files without the ``.json`` suffix are skipped. A file that fails to
        decode is still listed, with ``KEYPAIR_ERROR_MARKER`` as its key.
        """
        if not self.exists():
            self.ensure_directory()
            return []

        accounts: list[AccountEntry] = []
        try:
            with os.scandir(self.keys_folder) as it:
                files = [entry for entry in it if entry.is_file()]
        except OSError as e:
            raise KeystoreIOError(f"Error reading keys folder {self.keys_folder}: {e.strerror or e}") from e

        logger.debug(f"Found {len(files)} files in keys folder {self.keys_folder}")

        for entry in files:
            if entry.name.startswith(MINT_FILE_PREFIX):
                continue
            if not entry.name.endswith(KEY_FILE_SUFFIX):
                continue

            name = entry.name[: -len(KEY_FILE_SUFFIX)]
            if not name:
                continue
            try:
                keypair = self._read_keypair(Path(entry.path))
            except KeystoreError as e:
                logger.warning(f"Error processing account file {entry.name}: {e}")
                accounts.append(AccountEntry(name, KEYPAIR_ERROR_MARKER))
                continue
            accounts.append(AccountEntry(name, str(keypair.pubkey())))

        return accounts

    def _read_keypair(self, path: Path) -> Keypair:
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise KeystoreIOError(f"Error reading key file {path}: {e.strerror or e}") from e
        return decode_keypair(raw, path)

    def _publish(self, path: Path, keypair: Keypair) -> bool:
        """Write ``keypair`` to ``path`` unless the file already exists.

        The bytes go to a private temp file first and are then hard-linked to
        the final name, so readers never observe a partially written key.

        Returns:
            True if this call created the file, False if it already existed
        """
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.keys_folder, prefix=f".{path.stem}-", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(list(bytes(keypair)), f)
                f.flush()
                os.fsync(f.fileno())
            try:
                os.link(tmp_path, path)
            except FileExistsError:
                return False
            return True
        except OSError as e:
            logger.error(f"Error writing key file {path}: {e}")
            raise KeystoreIOError(f"Error writing key file {path}: {e.strerror or e}") from e
        finally:
            if tmp_path is not None:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_path)
