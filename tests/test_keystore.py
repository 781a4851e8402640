"""Tests for the keypair store."""

import json
from concurrent.futures import ThreadPoolExecutor

import pytest
from solders.keypair import Keypair

from core.exceptions import (
    AccountNotFoundError,
    CorruptKeyFileError,
    KeystoreIOError,
    ValidationError,
)
from core.keystore import (
    KEYPAIR_ERROR_MARKER,
    KeypairStore,
    decode_keypair,
    validate_account_name,
)


def test_get_or_create_writes_secret_key_array(keystore, keys_folder):
    wallet = keystore.get_or_create("default")

    path = keys_folder / "default.json"
    assert path.is_file()
    data = json.loads(path.read_text())
    assert len(data) == 64
    assert all(0 <= b <= 255 for b in data)
    assert Keypair.from_bytes(bytes(data)).pubkey() == wallet.pubkey
    assert wallet.name == "default"


def test_get_or_create_is_idempotent(keystore, keys_folder):
    first = keystore.get_or_create("default")
    contents = (keys_folder / "default.json").read_bytes()

    second = keystore.get_or_create("default")

    assert second.pubkey == first.pubkey
    assert (keys_folder / "default.json").read_bytes() == contents


def test_get_or_create_creates_nested_folder(tmp_path):
    store = KeypairStore(tmp_path / "a" / "b" / "keys")
    store.get_or_create("trader")
    assert (tmp_path / "a" / "b" / "keys" / "trader.json").is_file()


def test_existing_cli_key_file_is_used(keystore, keys_folder):
    keypair = Keypair()
    keys_folder.mkdir()
    (keys_folder / "imported.json").write_text(json.dumps(list(bytes(keypair))))

    wallet = keystore.get_or_create("imported")

    assert wallet.pubkey == keypair.pubkey()


def test_concurrent_get_or_create_returns_one_identity(keystore, keys_folder):
    with ThreadPoolExecutor(max_workers=8) as pool:
        wallets = list(pool.map(lambda _: keystore.get_or_create("shared"), range(16)))

    assert len({str(w.pubkey) for w in wallets}) == 1
    assert sorted(p.name for p in keys_folder.iterdir()) == ["shared.json"]


def test_load_missing_account(keystore, keys_folder):
    with pytest.raises(AccountNotFoundError, match="Account file not found for ghost"):
        keystore.load("ghost")
    assert not (keys_folder / "ghost.json").exists()


def test_load_existing_account(keystore):
    created = keystore.get_or_create("trader")
    assert keystore.load("trader").pubkey == created.pubkey


@pytest.mark.parametrize(
    "contents",
    [
        "not json",
        json.dumps([1, 2, 3]),
        json.dumps([300] * 64),
        json.dumps({"secret": [0] * 64}),
    ],
)
def test_corrupt_key_file(keystore, keys_folder, contents):
    keys_folder.mkdir()
    (keys_folder / "broken.json").write_text(contents)

    with pytest.raises(CorruptKeyFileError):
        keystore.get_or_create("broken")


def test_key_file_with_mismatched_public_half_is_rejected():
    secret = bytes(Keypair())[:32] + bytes(Keypair())[32:]
    with pytest.raises(CorruptKeyFileError):
        decode_keypair(json.dumps(list(secret)))


@pytest.mark.parametrize("name", ["", "   ", "../escape", "a/b", "a\\b", ".hidden", "mint-abc"])
def test_invalid_account_names(keystore, name):
    with pytest.raises(ValidationError):
        keystore.get_or_create(name)


def test_account_name_is_stripped():
    assert validate_account_name("  trader ") == "trader"


def test_unwritable_keys_folder(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where a folder should be")
    store = KeypairStore(blocker / "keys")

    with pytest.raises(KeystoreIOError):
        store.get_or_create("default")


def test_list_accounts_creates_missing_folder(keystore, keys_folder):
    assert keystore.list_accounts() == []
    assert keys_folder.is_dir()


def test_list_accounts_skips_mints_and_other_files(keystore, keys_folder):
    default = keystore.get_or_create("default")
    trader = keystore.get_or_create("trader")
    keystore.save_mint_keypair(Keypair())
    (keys_folder / "notes.txt").write_text("hello")
    (keys_folder / "nested.json").mkdir()

    accounts = {entry.name: entry.public_key for entry in keystore.list_accounts()}

    assert accounts == {"default": str(default.pubkey), "trader": str(trader.pubkey)}


def test_list_accounts_marks_unreadable_files(keystore, keys_folder):
    keystore.get_or_create("good")
    (keys_folder / "bad.json").write_text("[1, 2")

    entries = {entry.name: entry for entry in keystore.list_accounts()}

    assert entries["bad"].public_key == KEYPAIR_ERROR_MARKER
    assert entries["good"].public_key != KEYPAIR_ERROR_MARKER



def test_deeply_nested_key_file_is_corrupt(keystore, keys_folder):
    keystore.get_or_create("good")
    (keys_folder / "deep.json").write_text("[" * 100000)

    entries = {entry.name: entry.public_key for entry in keystore.list_accounts()}
    assert entries["deep"] == KEYPAIR_ERROR_MARKER
    assert entries["good"] != KEYPAIR_ERROR_MARKER

    with pytest.raises(CorruptKeyFileError):
        keystore.get_or_create("deep")


def test_list_accounts_skips_nameless_key_file(keystore, keys_folder):
    wallet = keystore.get_or_create("default")
    (keys_folder / ".json").write_text(json.dumps(list(bytes(Keypair()))))

    accounts = [(entry.name, entry.public_key) for entry in keystore.list_accounts()]

    assert accounts == [("default", str(wallet.pubkey))]

def test_save_mint_keypair(keystore, keys_folder):
    mint = Keypair()

    path = keystore.save_mint_keypair(mint)

    assert path == keys_folder / f"mint-{mint.pubkey()}.json"
    assert json.loads(path.read_text()) == list(bytes(mint))
    with pytest.raises(KeystoreIOError):
        keystore.save_mint_keypair(mint)


def test_no_temp_files_left_behind(keystore, keys_folder):
    keystore.get_or_create("default")
    keystore.get_or_create("default")
    assert [p.name for p in keys_folder.iterdir()] == ["default.json"]


def test_default_account_round_trip(keystore):
    """A fresh store creates 'default' once and then lists it."""
    first = keystore.get_or_create("default")
    second = keystore.get_or_create("default")

    assert first.pubkey == second.pubkey
    listed = keystore.list_accounts()
    assert [(e.name, e.public_key) for e in listed] == [("default", str(first.pubkey))]
