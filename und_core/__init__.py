"""
und-py - Python client SDK for the UND Mainchain.

Key features:
- secp256k1 keys, Bech32 addresses, deterministic low-S signatures
- BIP-39 mnemonics, BIP-32/44 derivation and encrypted keystores
- Canonical JSON sign documents and binary amino primitives
- Closed message registry (send, staking, enterprise, beacon, wrkchain)
- Local-key and hardware-device signing behind one interface
- Async REST client built on aiohttp
"""

__version__ = "1.0.0"
__all__ = [
    "config",
    "errors",
    "logging_config",
    "crypto_utils",
    "wallet",
    "encoder",
    "precision",
    "validation",
    "msg",
    "transaction",
    "signers",
    "http",
    "client",
]
