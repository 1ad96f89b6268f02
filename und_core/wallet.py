"""
Key material management for UND accounts.

  - BIP-39 mnemonic phrase generation, validation and seed derivation
  - HD key derivation (BIP-32 / BIP-44, path 44'/5555'/0'/0/<index>)
  - Encrypted keystore import / export (Web3 secret-storage layout)
  - :class:`Wallet`, an in-memory holder for one private key

Nothing here touches disk; persisting a keystore is the caller's job.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import os
import struct
import uuid
from typing import Any

from Crypto.Cipher import AES
from Crypto.Hash import keccak
from Crypto.Protocol.KDF import scrypt
from ecdsa import SECP256k1, SigningKey
from mnemonic import Mnemonic

from und_core.config import ChainConfig
from und_core.crypto_utils import (
    generate_private_key,
    get_address_from_private_key,
    get_public_key_from_private_key,
    hash160,
)
from und_core.errors import KeystoreError, ValidationError

_DEFAULT_CHAIN = ChainConfig()


# ===================================================================
#  BIP-39 Mnemonic Support
# ===================================================================

_MNEMO = Mnemonic("english")


def generate_mnemonic(strength: int = 256) -> str:
    """Generate a new BIP-39 phrase (256 bits of entropy = 24 words)."""
    if strength not in (128, 160, 192, 224, 256):
        raise ValidationError("strength must be 128/160/192/224/256")
    return _MNEMO.generate(strength=strength)


def validate_mnemonic(mnemonic: str) -> bool:
    """Word list membership and checksum check."""
    return isinstance(mnemonic, str) and _MNEMO.check(mnemonic.strip())


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """Convert a mnemonic phrase to a 64-byte seed (BIP-39)."""
    return Mnemonic.to_seed(mnemonic.strip(), passphrase)


# ===================================================================
#  HD Key Derivation (BIP-32 / BIP-44)
# ===================================================================

class HDNode:
    """
    Hierarchical Deterministic key derivation node.

    Implements BIP-32 private derivation with HMAC-SHA512.
    UND accounts live at m/44'/5555'/0'/0/<index>.
    """

    HARDENED = 0x80000000

    def __init__(self, private_key: bytes, chain_code: bytes, depth: int = 0,
                 index: int = 0, parent_fingerprint: bytes = b"\x00" * 4):
        self.private_key = private_key
        self.chain_code = chain_code
        self.depth = depth
        self.index = index
        self.parent_fingerprint = parent_fingerprint

    @classmethod
    def from_seed(cls, seed: bytes) -> HDNode:
        """Create master node from a BIP-39 seed."""
        I = hmac.new(b"Bitcoin seed", seed, hashlib.sha512).digest()
        key_int = int.from_bytes(I[:32], "big")
        if not 0 < key_int < SECP256k1.order:
            raise ValidationError("seed produces an invalid master key")
        return cls(private_key=I[:32], chain_code=I[32:])

    @property
    def public_key(self) -> bytes:
        """Compressed (33-byte) public key."""
        sk = SigningKey.from_string(self.private_key, curve=SECP256k1)
        return sk.get_verifying_key().to_string("compressed")

    @property
    def fingerprint(self) -> bytes:
        """First 4 bytes of Hash160 of the compressed public key."""
        return hash160(self.public_key)[:4]

    def derive_child(self, index: int) -> HDNode:
        """Derive a child node at the given index."""
        if index >= self.HARDENED:
            data = b"\x00" + self.private_key + struct.pack(">I", index)
        else:
            data = self.public_key + struct.pack(">I", index)

        I = hmac.new(self.chain_code, data, hashlib.sha512).digest()
        tweak = int.from_bytes(I[:32], "big")
        child_key_int = (tweak + int.from_bytes(self.private_key, "big")) % SECP256k1.order
        if tweak >= SECP256k1.order or child_key_int == 0:
            # Probability ~2^-127; BIP-32 says skip to the next index
            return self.derive_child(index + 1)

        return HDNode(
            private_key=child_key_int.to_bytes(32, "big"),
            chain_code=I[32:],
            depth=self.depth + 1,
            index=index,
            parent_fingerprint=self.fingerprint,
        )

    def derive_path(self, path: str) -> HDNode:
        """
        Derive from a BIP-44 path string like "m/44'/5555'/0'/0/0".
        """
        if path == "m":
            return self
        if path.startswith("m/"):
            path = path[2:]

        node = self
        for component in path.strip("/").split("/"):
            try:
                if component.endswith("'") or component.endswith("h"):
                    index = int(component[:-1]) + self.HARDENED
                else:
                    index = int(component)
            except ValueError:
                raise ValidationError(f"invalid path component {component!r}") from None
            node = node.derive_child(index)
        return node


def parse_hd_path(path: str) -> list[int]:
    """Split "44'/5555'/0'/0/3" into [44, 5555, 0, 0, 3] (hardening dropped)."""
    if path.startswith("m/"):
        path = path[2:]
    return [int(part.rstrip("'h")) for part in path.strip("/").split("/")]


def get_private_key_from_mnemonic(
    mnemonic: str,
    derive: bool = True,
    index: int = 0,
    hd_path: str = _DEFAULT_CHAIN.hd_path,
    passphrase: str = "",
) -> str:
    """
    Recover the private key (hex) for account *index* of a mnemonic.

    With ``derive=False`` the BIP-32 master key is returned instead.
    """
    if not validate_mnemonic(mnemonic):
        raise ValidationError("wrong mnemonic format")
    if index < 0:
        raise ValidationError("index should be a non-negative integer")
    master = HDNode.from_seed(mnemonic_to_seed(mnemonic, passphrase))
    if not derive:
        return master.private_key.hex()
    return master.derive_path(f"{hd_path}{index}").private_key.hex()


# ===================================================================
#  Encrypted keystore
# ===================================================================

_KDF_ITERATIONS = 262144
_KDF_DKLEN = 32
_CIPHER = "aes-256-ctr"
_CIPHER_KEY_LEN = {"aes-256-ctr": 32, "aes-128-ctr": 16}


def _keccak_hex(data: bytes, bits: int) -> str:
    return keccak.new(digest_bits=bits, data=data).hexdigest()


def _aes_ctr(key: bytes, iv: bytes, data: bytes) -> bytes:
    """AES-CTR with the full 16-byte IV as a big-endian 128-bit counter."""
    cipher = AES.new(key, AES.MODE_CTR, nonce=b"", initial_value=iv)
    return cipher.encrypt(data)


def _derive_key(password: str, crypto: dict[str, Any]) -> bytes:
    kdf = crypto.get("kdf")
    params = crypto.get("kdfparams") or {}
    if kdf not in ("pbkdf2", "scrypt"):
        raise KeystoreError(f"Unsupported key derivation scheme: {kdf!r}")
    if kdf == "pbkdf2" and params.get("prf") != "hmac-sha256":
        raise KeystoreError("Unsupported parameters to PBKDF2")
    try:
        salt = bytes.fromhex(params["salt"])
        dklen = int(params.get("dklen", _KDF_DKLEN))
        if kdf == "pbkdf2":
            return hashlib.pbkdf2_hmac(
                "sha256", password.encode("utf-8"), salt, int(params["c"]), dklen,
            )
        return scrypt(
            password.encode("utf-8"), salt, key_len=dklen,
            N=int(params["n"]), r=int(params["r"]), p=int(params["p"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise KeystoreError(f"malformed kdfparams: {exc}") from exc


def generate_key_store(private_key: str | bytes, password: str) -> dict:
    """
    Encrypt *private_key* into a version-1 keystore dict.

    PBKDF2-HMAC-SHA256 (262 144 rounds) -> AES-256-CTR, with a
    Keccak-512 mac over ``dk[16:32] || ciphertext``.
    """
    if not isinstance(password, str) or not password:
        raise KeystoreError("No password given.")
    if isinstance(private_key, str):
        private_key = bytes.fromhex(private_key)

    salt = os.urandom(32)
    iv = os.urandom(16)
    derived = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt, _KDF_ITERATIONS, _KDF_DKLEN,
    )
    ciphertext = _aes_ctr(derived[:32], iv, bytes(private_key))
    mac = _keccak_hex(derived[16:32] + ciphertext, 512)

    return {
        "version": 1,
        "id": str(uuid.uuid4()),
        "crypto": {
            "ciphertext": ciphertext.hex(),
            "cipherparams": {"iv": iv.hex()},
            "cipher": _CIPHER,
            "kdf": "pbkdf2",
            "kdfparams": {
                "dklen": _KDF_DKLEN,
                "salt": salt.hex(),
                "c": _KDF_ITERATIONS,
                "prf": "hmac-sha256",
            },
            "mac": mac,
        },
    }


def get_private_key_from_key_store(keystore: dict | str, password: str) -> str:
    """
    Decrypt a keystore and return the private key as hex.

    The mac is checked before decryption.  Accepted mac schemes are
    Keccak-512 (this SDK), Keccak-256 (Ethereum V3) and the legacy
    SHA-256 digest; anything else raises :class:`KeystoreError`.
    """
    if not isinstance(password, str):
        raise KeystoreError("No password given.")
    if isinstance(keystore, str):
        try:
            keystore = json.loads(keystore)
        except ValueError as exc:
            raise KeystoreError(f"keystore is not valid JSON: {exc}") from exc

    crypto = keystore.get("crypto") or keystore.get("Crypto")
    if not isinstance(crypto, dict):
        raise KeystoreError("keystore has no crypto section")

    cipher_name = crypto.get("cipher")
    key_len = _CIPHER_KEY_LEN.get(cipher_name)
    if key_len is None:
        raise KeystoreError(f"Unsupported cipher: {cipher_name!r}")

    derived = _derive_key(password, crypto)
    try:
        ciphertext = bytes.fromhex(crypto["ciphertext"])
        iv = bytes.fromhex(crypto["cipherparams"]["iv"])
        expected = str(crypto["mac"]).lower()
    except (KeyError, TypeError, ValueError) as exc:
        raise KeystoreError(f"malformed keystore: {exc}") from exc

    mac_body = derived[16:32] + ciphertext
    candidates = (
        _keccak_hex(mac_body, 512),
        _keccak_hex(mac_body, 256),
        hashlib.sha256(mac_body).hexdigest(),
    )
    if not any(hmac.compare_digest(c, expected) for c in candidates):
        raise KeystoreError("Keystore mac check failed - wrong password?")

    return _aes_ctr(derived[:key_len], iv, ciphertext).hex()


# ===================================================================
#  Wallet
# ===================================================================

class Wallet:
    """An in-memory UND account: one private key and what derives from it."""

    def __init__(self, private_key: str | bytes, chain: ChainConfig = _DEFAULT_CHAIN,
                 mnemonic: str | None = None):
        if isinstance(private_key, bytes):
            private_key = private_key.hex()
        self.private_key = private_key.lower()
        self.chain = chain
        self.mnemonic = mnemonic
        self.public_key = get_public_key_from_private_key(self.private_key)
        self.address = get_address_from_private_key(self.private_key, chain.bech32_prefix)

    # ---- factory methods ----

    @classmethod
    def create(cls, chain: ChainConfig = _DEFAULT_CHAIN) -> Wallet:
        """Generate a brand-new random wallet."""
        return cls(generate_private_key(), chain)

    @classmethod
    def from_private_key(cls, private_key: str | bytes,
                         chain: ChainConfig = _DEFAULT_CHAIN) -> Wallet:
        return cls(private_key, chain)

    @classmethod
    def from_mnemonic(cls, mnemonic: str, index: int = 0,
                      chain: ChainConfig = _DEFAULT_CHAIN) -> Wallet:
        """Restore account *index* of a BIP-39 phrase."""
        pk = get_private_key_from_mnemonic(mnemonic, index=index, hd_path=chain.hd_path)
        return cls(pk, chain, mnemonic=mnemonic)

    @classmethod
    def create_hd(cls, chain: ChainConfig = _DEFAULT_CHAIN) -> Wallet:
        """Generate a new 24-word phrase and return its first account."""
        return cls.from_mnemonic(generate_mnemonic(), chain=chain)

    @classmethod
    def from_keystore(cls, keystore: dict | str, password: str,
                      chain: ChainConfig = _DEFAULT_CHAIN) -> Wallet:
        return cls(get_private_key_from_key_store(keystore, password), chain)

    # ---- serialisation ----

    @property
    def val_address(self) -> str:
        """The same key encoded with the validator-operator prefix."""
        return get_address_from_private_key(self.private_key, self.chain.bech32_val_prefix)

    def to_keystore(self, password: str) -> dict:
        return generate_key_store(self.private_key, password)

    def to_dict(self) -> dict:
        data = {
            "address": self.address,
            "public_key": self.public_key.hex(),
            "private_key": self.private_key,
        }
        if self.mnemonic:
            data["mnemonic"] = self.mnemonic
        return data

    def __repr__(self) -> str:
        return f"Wallet({self.address})"
