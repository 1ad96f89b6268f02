"""
TOML-based configuration for und_core clients.

Loads settings from a TOML file and/or environment variables.
Environment variables take precedence over file values.

All sections are frozen dataclasses: a configuration is a value that is
handed to :class:`~und_core.client.UndClient`, never a process-wide global,
so clients for different chains can live side by side.

Usage:
    from und_core.config import load_config
    cfg = load_config("und.toml")
"""

from __future__ import annotations

import dataclasses
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeVar

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib  # type: ignore[import]
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[import,no-redef]


@dataclass(frozen=True)
class ChainConfig:
    """Chain constants: HD path, address prefixes, denominations, REST paths."""
    hd_path: str = "44'/5555'/0'/0/"
    bech32_prefix: str = "und"
    bech32_val_prefix: str = "undvaloper"
    base_denom: str = "nund"
    # Denominations that are scaled by base_number before hitting the wire.
    display_denoms: tuple[str, ...] = ("und", "fund")
    base_number: int = 10 ** 9
    # Empty = fetch from the node's /node_info on first use.
    chain_id: str = ""

    api_node_info: str = "/node_info"
    api_query_account: str = "/auth/accounts"
    api_broadcast_tx: str = "/txs"
    api_query_tx: str = "/txs"
    api_query_txs: str = "/txs"
    api_query_ent_pos: str = "/enterprise/pos"
    api_query_ent_locked: str = "/enterprise/locked"
    api_query_staking_delegators_prefix: str = "/staking/delegators"
    api_query_staking_delegations_suffix: str = "delegations"
    api_query_staking_unbonding_delegations_suffix: str = "unbonding_delegations"
    api_query_staking_validators_suffix: str = "validators"
    api_query_staking_validators_prefix: str = "/staking/validators"
    api_query_staking_redelegations: str = "/staking/redelegations"
    api_query_distribution_delegators_prefix: str = "/distribution/delegators"
    api_query_distribution_validators_prefix: str = "/distribution/validators"
    api_query_distribution_rewards_suffix: str = "rewards"
    api_query_distribution_withdraw_address_suffix: str = "withdraw_address"
    api_query_distribution_outstanding_rewards_suffix: str = "outstanding_rewards"
    api_query_supply: str = "/supply/total"
    api_query_beacon_params: str = "/beacon/params"
    api_query_beacon: str = "/beacon/beacon"
    api_query_wrkchain_params: str = "/wrkchain/params"
    api_query_wrkchain: str = "/wrkchain/wrkchain"


@dataclass(frozen=True)
class HTTPConfig:
    """Node REST endpoint settings."""
    server_url: str = ""
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class TxConfig:
    """Transaction defaults."""
    broadcast_mode: str = "sync"   # "sync", "async" or "block"
    default_denom: str = "nund"


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    format: str = "human"   # "human" or "json"
    file: str | None = None


@dataclass(frozen=True)
class UndConfig:
    """Top-level configuration container."""
    chain: ChainConfig = field(default_factory=ChainConfig)
    http: HTTPConfig = field(default_factory=HTTPConfig)
    tx: TxConfig = field(default_factory=TxConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_T = TypeVar("_T")


def _merge(dc: _T, raw: dict[str, Any]) -> _T:
    """Return a copy of dataclass *dc* with the known keys of *raw* applied."""
    known = {f.name for f in dataclasses.fields(dc)}  # type: ignore[arg-type]
    changes: dict[str, Any] = {}
    for key, value in raw.items():
        key_under = key.replace("-", "_")
        if key_under in known:
            if isinstance(value, list):
                value = tuple(value)
            changes[key_under] = value
    return dataclasses.replace(dc, **changes)  # type: ignore[type-var]


def load_config(path: str | None = None) -> UndConfig:
    """
    Load configuration from a TOML file, then overlay environment variables.

    Env-var mapping:
        UND_SERVER_URL      -> http.server_url
        UND_TIMEOUT         -> http.timeout_seconds
        UND_CHAIN_ID        -> chain.chain_id
        UND_BROADCAST_MODE  -> tx.broadcast_mode
        UND_LOG_LEVEL       -> logging.level
        UND_LOG_FMT         -> logging.format
        UND_LOG_FILE        -> logging.file
    """
    chain = ChainConfig()
    http = HTTPConfig()
    tx = TxConfig()
    log = LoggingConfig()

    # ── TOML file ────────────────────────────────────────────────
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, "rb") as f:
                data = tomllib.load(f)
            chain = _merge(chain, data.get("chain", {}))
            http = _merge(http, data.get("http", {}))
            tx = _merge(tx, data.get("tx", {}))
            log = _merge(log, data.get("logging", {}))

    # ── Environment variable overrides ───────────────────────────
    if v := os.environ.get("UND_SERVER_URL"):
        http = dataclasses.replace(http, server_url=v)
    if v := os.environ.get("UND_TIMEOUT"):
        http = dataclasses.replace(http, timeout_seconds=float(v))
    if v := os.environ.get("UND_CHAIN_ID"):
        chain = dataclasses.replace(chain, chain_id=v)
    if v := os.environ.get("UND_BROADCAST_MODE"):
        tx = dataclasses.replace(tx, broadcast_mode=v.lower())
    if v := os.environ.get("UND_LOG_LEVEL"):
        log = dataclasses.replace(log, level=v.upper())
    if v := os.environ.get("UND_LOG_FMT"):
        log = dataclasses.replace(log, format=v)
    if v := os.environ.get("UND_LOG_FILE"):
        log = dataclasses.replace(log, file=v)

    return UndConfig(chain=chain, http=http, tx=tx, logging=log)
