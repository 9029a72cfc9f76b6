"""Named deterministic test accounts.

Every name maps to the same key pair on every run, so fixtures that mention
ALICE or BOB are reproducible byte for byte.
"""

from __future__ import annotations

from .account import Account
from .crypto.ed25519 import Ed25519PrivateKey, KeyGen
from .errors import ErrorCode, FixtureError
from .transaction import SignedTransaction, sign_raw_txn
from .types import RawTransaction

TEST_ACCOUNTS_SEED = bytes(range(32))

NAMES = ("ALICE", "BOB", "CAROL", "DAVE", "EVE", "FRANK", "GRACE", "HEIDI", "IVAN")

_keygen = KeyGen.from_seed(TEST_ACCOUNTS_SEED)
_accounts = {name: Account.with_keypair(*_keygen.generate_keypair()) for name in NAMES}

# Named constants: 16-byte account addresses
ALICE = _accounts["ALICE"].address
BOB = _accounts["BOB"].address
CAROL = _accounts["CAROL"].address
DAVE = _accounts["DAVE"].address
EVE = _accounts["EVE"].address
FRANK = _accounts["FRANK"].address
GRACE = _accounts["GRACE"].address
HEIDI = _accounts["HEIDI"].address
IVAN = _accounts["IVAN"].address

# Map address bytes -> private key
SEED_MAP: dict[bytes, Ed25519PrivateKey] = {
    acct.address: acct.privkey for acct in _accounts.values()
}


def account(name: str) -> Account:
    """A fresh ``Account`` for ``name``; callers may rotate its keys freely."""
    acct = _accounts[name]
    return Account(acct.address, acct.privkey, acct.pubkey)


def sign_transaction(raw_txn: RawTransaction) -> SignedTransaction:
    """Sign ``raw_txn`` with the key of the named account that sends it."""
    privkey = SEED_MAP.get(raw_txn.sender)
    if privkey is None:
        raise FixtureError(
            ErrorCode.INVALID_ADDRESS, f"{raw_txn.sender.hex()} is not a named test account"
        )
    return sign_raw_txn(raw_txn, privkey, privkey.public_key())
