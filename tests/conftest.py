"""
Shared pytest fixtures for the und-py test suite.
"""

from __future__ import annotations

import hashlib

import pytest
from ecdsa import SECP256k1, SigningKey
from ecdsa.util import sigencode_der

from und_core.config import UndConfig
from und_core.crypto_utils import get_address_from_private_key, get_public_key_from_private_key
from und_core.errors import TransportError
from und_core.signers import DEVICE_OK, DeviceTransport

# Known-answer key pair
PRIVATE_KEY = "4997c324f80602979c776ea2f838435373ccb78d83b1755ae282fdfab98f8c96"
ADDRESS = "und1n4ylq3pfzvld4a89ps8h0k7ddfxph7rc33g2dm"

# Second key, used as recipient / device key
OTHER_KEY = "30c5e838578a29e3e9273edddd753d6c9b38aca2446dd84bdfe2e5988b0da0a1"

CHAIN_ID = "UND-Mainchain-TestNet-v4"

FEE = {"amount": [{"denom": "nund", "amount": "25000"}], "gas": "200000"}


def account_body(address: str, account_number: str = "7", sequence: str = "3",
                 coins=None) -> dict:
    return {
        "height": "1024",
        "result": {
            "account": {
                "type": "cosmos-sdk/Account",
                "value": {
                    "address": address,
                    "coins": coins if coins is not None else [{"denom": "nund", "amount": "1000"}],
                    "account_number": account_number,
                    "sequence": sequence,
                },
            },
            "enterprise": {"locked": {"denom": "nund", "amount": "0"}},
        },
    }


class FakeHttp:
    """In-memory stand-in for HttpRequest: records calls, serves canned bodies."""

    def __init__(self, server: str = "http://node.test"):
        self.server = server
        self.calls: list[tuple] = []
        self.routes: dict[tuple[str, str], dict] = {}
        self.fail_paths: set[str] = set()
        self.closed = False

    def route(self, method: str, path: str, body, status: int = 200) -> None:
        self.routes[(method, path)] = {"status": status, "result": body}

    def add_account(self, address: str, **kwargs) -> None:
        self.route("GET", f"/auth/accounts/{address}", account_body(address, **kwargs))

    async def request(self, method, path, params=None, data=None, headers=None):
        self.calls.append((method, path, list(params) if params is not None else None, data, headers))
        if path in self.fail_paths:
            raise TransportError(f"{method} {self.server}{path} failed: connection refused")
        return self.routes.get(
            (method, path), {"status": 404, "result": {"error": "not found"}},
        )

    async def get(self, path, params=None):
        return await self.request("GET", path, params=params)

    async def post(self, path, data=None, headers=None):
        return await self.request("POST", path, data=data, headers=headers)

    async def close(self):
        self.closed = True

    def paths(self, method: str | None = None) -> list[str]:
        return [c[1] for c in self.calls if method is None or c[0] == method]


class FakeDevice(DeviceTransport):
    """Hardware device double backed by a local key; returns DER signatures."""

    def __init__(self, private_key: str = OTHER_KEY, high_s: bool = False,
                 return_code: int = DEVICE_OK, error_message: str = "No errors",
                 sign_return_code: int = DEVICE_OK):
        self.sk = SigningKey.from_string(bytes.fromhex(private_key), curve=SECP256k1)
        self.private_key = private_key
        self.high_s = high_s
        self.return_code = return_code
        self.sign_return_code = sign_return_code
        self.error_message = error_message
        self.paths: list[list[int]] = []
        self.messages: list[str] = []

    async def get_address_and_pub_key(self, path, prefix):
        self.paths.append(list(path))
        return {
            "return_code": self.return_code,
            "error_message": self.error_message,
            "bech32_address": get_address_from_private_key(self.private_key, prefix),
            "compressed_pk": get_public_key_from_private_key(self.private_key),
        }

    async def sign(self, path, message):
        self.paths.append(list(path))
        self.messages.append(message)
        if self.sign_return_code != DEVICE_OK:
            return {
                "return_code": self.sign_return_code,
                "error_message": self.error_message,
            }
        digest = hashlib.sha256(message.encode("utf-8")).digest()
        r, s = self.sk.sign_digest_deterministic(
            digest, hashfunc=hashlib.sha256, sigencode=lambda r, s, order: (r, s),
        )
        order = SECP256k1.order
        if self.high_s and s <= order // 2:
            s = order - s
        return {
            "return_code": DEVICE_OK,
            "error_message": "No errors",
            "signature": sigencode_der(r, s, order),
        }


@pytest.fixture
def fake_http():
    """Fake node with node info, two funded accounts and a broadcast endpoint."""
    http = FakeHttp()
    http.route("GET", "/node_info", {"node_info": {"network": CHAIN_ID}})
    http.add_account(ADDRESS)
    http.add_account(get_address_from_private_key(OTHER_KEY), account_number="12", sequence="0")
    http.route("POST", "/txs", {"height": "0", "txhash": "ABCDEF0123456789"})
    return http


@pytest.fixture
def config():
    return UndConfig()


@pytest.fixture
def fake_device():
    return FakeDevice()
