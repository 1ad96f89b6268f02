"""
Cryptographic primitives for the UND Mainchain.

secp256k1 keys via ``ecdsa``, Bech32 addresses via ``bech32``.

  - Private keys are 32-byte scalars, exchanged as lowercase hex strings
  - Public keys are 33-byte compressed SEC1 points
  - Addresses are Bech32(prefix, RIPEMD160(SHA256(compressed_pubkey)))
  - Signatures are 64-byte r||s, deterministic (RFC 6979) and low-S
"""

from __future__ import annotations

import hashlib
import secrets

import bech32
from ecdsa import BadSignatureError, SECP256k1, SigningKey, VerifyingKey
from ecdsa.der import UnexpectedDER
from ecdsa.keys import MalformedPointError
from ecdsa.util import (
    MalformedSignature,
    sigdecode_der,
    sigdecode_string,
    sigencode_string_canonize,
)

from und_core.errors import ValidationError

CURVE_ORDER = SECP256k1.order
DEFAULT_PREFIX = "und"


# ===================================================================
#  Hashing
# ===================================================================

def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def ripemd160(data: bytes) -> bytes:
    try:
        return hashlib.new("ripemd160", data).digest()
    except ValueError:
        # OpenSSL 3 builds may not expose ripemd160 through hashlib
        from Crypto.Hash import RIPEMD160
        return RIPEMD160.new(data).digest()


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data)), the 20-byte account hash."""
    return ripemd160(sha256(data))


# ===================================================================
#  Keys
# ===================================================================

def _key_bytes(private_key: str | bytes) -> bytes:
    if isinstance(private_key, str):
        try:
            raw = bytes.fromhex(private_key)
        except ValueError:
            raise ValidationError("private key must be a hex string") from None
    else:
        raw = bytes(private_key)
    if len(raw) != 32:
        raise ValidationError(f"private key must be 32 bytes, got {len(raw)}")
    if not 0 < int.from_bytes(raw, "big") < CURVE_ORDER:
        raise ValidationError("private key is out of range for secp256k1")
    return raw


def _signing_key(private_key: str | bytes) -> SigningKey:
    return SigningKey.from_string(_key_bytes(private_key), curve=SECP256k1)


def generate_private_key() -> str:
    """Return a fresh random private key as hex (retries out-of-range draws)."""
    while True:
        candidate = secrets.token_bytes(32)
        if 0 < int.from_bytes(candidate, "big") < CURVE_ORDER:
            return candidate.hex()


def get_public_key_from_private_key(private_key: str | bytes) -> bytes:
    """33-byte compressed public key for *private_key*."""
    return _signing_key(private_key).get_verifying_key().to_string("compressed")


def _public_key_bytes(public_key: str | bytes) -> bytes:
    if isinstance(public_key, str):
        public_key = bytes.fromhex(public_key)
    if len(public_key) == 33:
        return bytes(public_key)
    # Accept uncompressed (65 or 64 byte) points and compress them
    try:
        vk = VerifyingKey.from_string(public_key, curve=SECP256k1)
    except (MalformedPointError, ValueError) as exc:
        raise ValidationError(f"invalid public key: {exc}") from exc
    return vk.to_string("compressed")


# ===================================================================
#  Addresses
# ===================================================================

def encode_address(raw: bytes, prefix: str = DEFAULT_PREFIX) -> str:
    five_bit = bech32.convertbits(raw, 8, 5)
    if five_bit is None:
        raise ValidationError("cannot convert address bytes to 5-bit groups")
    return bech32.bech32_encode(prefix, five_bit)


def get_address_from_public_key(public_key: str | bytes,
                                prefix: str = DEFAULT_PREFIX) -> str:
    return encode_address(hash160(_public_key_bytes(public_key)), prefix)


def get_address_from_private_key(private_key: str | bytes,
                                 prefix: str = DEFAULT_PREFIX) -> str:
    return get_address_from_public_key(
        get_public_key_from_private_key(private_key), prefix,
    )


def _decode(address: str) -> tuple[str | None, bytes | None]:
    hrp, data = bech32.bech32_decode(address)
    if hrp is None or data is None:
        return None, None
    raw = bech32.convertbits(data, 5, 8, False)
    if raw is None:
        return hrp, None
    return hrp, bytes(raw)


def check_address(address: str, prefix: str = DEFAULT_PREFIX) -> bool:
    """True if *address* is valid Bech32 with the given prefix and a 20-byte payload."""
    if not isinstance(address, str) or not address:
        return False
    try:
        hrp, raw = _decode(address)
    except (ValueError, TypeError):
        return False
    return hrp == prefix and raw is not None and len(raw) == 20


def decode_address(address: str) -> bytes:
    """Return the raw 20-byte account hash behind a Bech32 address."""
    hrp, raw = _decode(address)
    if hrp is None or raw is None:
        raise ValidationError(f"invalid bech32 address: {address!r}")
    return raw


# ===================================================================
#  Signatures
# ===================================================================

def generate_signature(sign_bytes_hex: str, private_key: str | bytes) -> bytes:
    """
    Sign SHA256(bytes.fromhex(sign_bytes_hex)).

    Returns the 64-byte compact signature r||s with a low S value.
    """
    digest = sha256(bytes.fromhex(sign_bytes_hex))
    return _signing_key(private_key).sign_digest_deterministic(
        digest,
        hashfunc=hashlib.sha256,
        sigencode=sigencode_string_canonize,
    )


def verify_signature(signature_hex: str, sign_bytes_hex: str,
                     public_key: str | bytes) -> bool:
    """Check a compact signature over SHA256(bytes.fromhex(sign_bytes_hex))."""
    try:
        vk = VerifyingKey.from_string(_public_key_bytes(public_key), curve=SECP256k1)
        digest = sha256(bytes.fromhex(sign_bytes_hex))
        return vk.verify_digest(bytes.fromhex(signature_hex), digest,
                                sigdecode=sigdecode_string)
    except (BadSignatureError, MalformedPointError, MalformedSignature,
            ValueError, ValidationError):
        return False


def signature_to_compact(signature: bytes) -> bytes:
    """
    Normalise a DER or 64-byte signature to compact low-S form.

    Hardware devices return DER-encoded signatures whose S may be in the
    upper half of the curve order; the chain accepts only the lower half.
    """
    signature = bytes(signature)
    if len(signature) == 64:
        r, s = sigdecode_string(signature, CURVE_ORDER)
    else:
        try:
            r, s = sigdecode_der(signature, CURVE_ORDER)
        except (UnexpectedDER, MalformedSignature) as exc:
            raise ValidationError(f"malformed DER signature: {exc}") from exc
    return sigencode_string_canonize(r, s, CURVE_ORDER)
