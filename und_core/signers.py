"""
Signing and broadcasting strategies.

A client session holds exactly one :class:`Signer`:

* :class:`LocalKeySigner` signs with an in-memory secp256k1 key.
* :class:`DeviceSigner` forwards the sorted sign document to a hardware
  device through a :class:`DeviceTransport` and normalises the returned
  signature so both strategies produce the same shape:

      {"signature": <base64 r||s>,
       "pub_key": {"type": "tendermint/PubKeySecp256k1", "value": <base64 33 bytes>}}

A :class:`Broadcaster` decides what happens to a signed envelope; the
default hands it straight to the client's ``send_transaction``.
"""

from __future__ import annotations

import base64
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from und_core.config import ChainConfig
from und_core.crypto_utils import (
    generate_signature,
    get_address_from_private_key,
    get_public_key_from_private_key,
    signature_to_compact,
)
from und_core.encoder import convert_object_to_sign_bytes, sort_object
from und_core.errors import DeviceError
from und_core.wallet import parse_hd_path

if TYPE_CHECKING:
    from und_core.client import UndClient
    from und_core.transaction import Transaction

logger = logging.getLogger("und_core.signers")

PUBKEY_TYPE = "tendermint/PubKeySecp256k1"
DEVICE_OK = 0x9000

_DEFAULT_CHAIN = ChainConfig()


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def signature_dict(signature: bytes, public_key: bytes) -> dict:
    return {
        "signature": _b64(signature),
        "pub_key": {"type": PUBKEY_TYPE, "value": _b64(public_key)},
    }


class Signer(ABC):
    """Produces the signature entry for a transaction's sign document."""

    address: str | None = None

    @abstractmethod
    async def sign(self, tx: Transaction) -> dict:
        ...


class LocalKeySigner(Signer):

    def __init__(self, private_key: str | bytes, prefix: str = "und"):
        if isinstance(private_key, bytes):
            private_key = private_key.hex()
        self._private_key = private_key
        self.public_key = get_public_key_from_private_key(private_key)
        self.address = get_address_from_private_key(private_key, prefix)

    async def sign(self, tx: Transaction) -> dict:
        signature = generate_signature(tx.sign_bytes().hex(), self._private_key)
        return signature_dict(signature, self.public_key)

    def __repr__(self) -> str:
        return f"LocalKeySigner({self.address})"


# ===================================================================
#  Hardware device
# ===================================================================

class DeviceTransport(ABC):
    """
    Narrow contract of a hardware signing app.

    Both calls return a dict carrying ``return_code`` (``0x9000`` on
    success) and ``error_message``.  ``get_address_and_pub_key`` adds
    ``bech32_address`` and ``compressed_pk``; ``sign`` adds ``signature``
    (DER or 64-byte compact).
    """

    @abstractmethod
    async def get_address_and_pub_key(self, path: list[int], prefix: str) -> dict:
        ...

    @abstractmethod
    async def sign(self, path: list[int], message: str) -> dict:
        ...


def device_path(hd_path: str, account_index: int) -> list[int]:
    """``"44'/5555'/0'/0/"`` + index -> ``[44, 5555, 0, 0, index]``."""
    return parse_hd_path(f"{hd_path}{int(account_index)}")


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return bytes.fromhex(value)
    return bytes(value)


class DeviceSigner(Signer):

    def __init__(self, transport: DeviceTransport, account_index: int = 0,
                 chain: ChainConfig = _DEFAULT_CHAIN):
        self.transport = transport
        self.account_index = account_index
        self.chain = chain
        self.path = device_path(chain.hd_path, account_index)
        self.address: str | None = None
        self.public_key: bytes | None = None

    async def _call(self, op: str, coro) -> dict:
        try:
            response = await coro
        except DeviceError:
            raise
        except Exception as exc:
            raise DeviceError(f"device {op} failed: {exc}") from exc
        code = response.get("return_code")
        if code != DEVICE_OK:
            message = response.get("error_message") or "unknown device error"
            raise DeviceError(f"device {op} failed: {message}", code, message)
        return response

    async def connect(self) -> DeviceSigner:
        """Fetch and cache the device's address and compressed public key."""
        response = await self._call(
            "get_address_and_pub_key",
            self.transport.get_address_and_pub_key(self.path, self.chain.bech32_prefix),
        )
        self.address = response["bech32_address"]
        self.public_key = _as_bytes(response["compressed_pk"])
        logger.info("Device signer connected address=%s path=%s", self.address, self.path)
        return self

    async def sign(self, tx: Transaction) -> dict:
        if self.public_key is None:
            await self.connect()
        message = convert_object_to_sign_bytes(sort_object(tx.sign_doc)).decode("utf-8")
        response = await self._call("sign", self.transport.sign(self.path, message))
        raw = response.get("signature")
        if not raw:
            raise DeviceError("device returned no signature")
        try:
            compact = signature_to_compact(_as_bytes(raw))
        except (ValueError, TypeError) as exc:
            raise DeviceError(f"device returned a malformed signature: {exc}") from exc
        return signature_dict(compact, self.public_key)

    def __repr__(self) -> str:
        return f"DeviceSigner({self.address or 'not connected'}, path={self.path})"


# ===================================================================
#  Broadcasting
# ===================================================================

class Broadcaster(ABC):

    @abstractmethod
    async def broadcast(self, client: UndClient, signed_tx: dict) -> dict:
        ...


class ImmediateBroadcaster(Broadcaster):
    """Posts the envelope to the node as soon as it is signed."""

    async def broadcast(self, client: UndClient, signed_tx: dict) -> dict:
        return await client.send_transaction(signed_tx)

