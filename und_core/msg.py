"""
Message registry: turns validated parameters into chain wire messages.

The set of message types is closed (:class:`MsgType`).  Each builder only
shapes parameters the client has already validated; amount normalisation
to the base denomination happens here so every caller gets it.

Usage:
    msg = build_message(MsgType.MSG_SEND, {
        "from": "und1...", "to": "und1...", "amount": "2.5", "denom": "und",
    })
    # {"type": "cosmos-sdk/MsgSend", "value": {...}}
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from und_core.config import ChainConfig
from und_core.errors import UnsupportedMessageError, ValidationError
from und_core.precision import to_base_units
from und_core.validation import MAX_INT64

_DEFAULT_CHAIN = ChainConfig()


class MsgType(str, Enum):
    MSG_SEND = "MsgSend"
    PURCHASE_UND = "PurchaseUnd"
    MSG_DELEGATE = "MsgDelegate"
    MSG_UNDELEGATE = "MsgUndelegate"
    MSG_BEGIN_REDELEGATE = "MsgBeginRedelegate"
    MSG_WITHDRAW_DELEGATION_REWARD = "MsgWithdrawDelegationReward"
    MSG_MODIFY_WITHDRAW_ADDRESS = "MsgModifyWithdrawAddress"
    REGISTER_BEACON = "RegisterBeacon"
    RECORD_BEACON_TIMESTAMP = "RecordBeaconTimestamp"
    REGISTER_WRKCHAIN = "RegisterWrkChain"
    RECORD_WRKCHAIN_BLOCK = "RecordWrkChainBlock"


# Amino route names; part of consensus-level routing, never rename.
WIRE_TYPES: dict[MsgType, str] = {
    MsgType.MSG_SEND: "cosmos-sdk/MsgSend",
    MsgType.PURCHASE_UND: "enterprise/PurchaseUnd",
    MsgType.MSG_DELEGATE: "cosmos-sdk/MsgDelegate",
    MsgType.MSG_UNDELEGATE: "cosmos-sdk/MsgUndelegate",
    MsgType.MSG_BEGIN_REDELEGATE: "cosmos-sdk/MsgBeginRedelegate",
    MsgType.MSG_WITHDRAW_DELEGATION_REWARD: "cosmos-sdk/MsgWithdrawDelegationReward",
    MsgType.MSG_MODIFY_WITHDRAW_ADDRESS: "cosmos-sdk/MsgModifyWithdrawAddress",
    MsgType.REGISTER_BEACON: "beacon/RegisterBeacon",
    MsgType.RECORD_BEACON_TIMESTAMP: "beacon/RecordBeaconTimestamp",
    MsgType.REGISTER_WRKCHAIN: "wrkchain/RegisterWrkChain",
    MsgType.RECORD_WRKCHAIN_BLOCK: "wrkchain/RecordWrkChainBlock",
}


def make_coin(amount: Any, denom: str, chain: ChainConfig = _DEFAULT_CHAIN) -> dict:
    base_amount, base_denom = to_base_units(amount, denom, chain)
    # Ceiling applies to the base-unit value that goes on the wire.
    if int(base_amount) >= MAX_INT64:
        raise ValidationError("amount should be less than 2^63")
    return {"denom": base_denom, "amount": base_amount}


def _uint(value: Any, name: str) -> str:
    """64-bit unsigned ids/heights travel as decimal strings in amino JSON."""
    try:
        n = int(str(value))
    except (TypeError, ValueError):
        raise ValidationError(f"{name} should be an unsigned integer") from None
    if n < 0:
        raise ValidationError(f"{name} should be an unsigned integer")
    return str(n)


def _req(params: dict, key: str) -> Any:
    try:
        return params[key]
    except KeyError:
        raise ValidationError(f"missing message field {key!r}") from None


# ---- builders ----

def _send(p: dict, chain: ChainConfig) -> dict:
    return {
        "from_address": _req(p, "from"),
        "to_address": _req(p, "to"),
        "amount": [make_coin(_req(p, "amount"), _req(p, "denom"), chain)],
    }


def _purchase_und(p: dict, chain: ChainConfig) -> dict:
    return {
        "purchaser": _req(p, "from"),
        "amount": make_coin(_req(p, "amount"), _req(p, "denom"), chain),
    }


def _delegation(p: dict, chain: ChainConfig) -> dict:
    return {
        "delegator_address": _req(p, "delegator_address"),
        "validator_address": _req(p, "validator_address"),
        "amount": make_coin(_req(p, "amount"), _req(p, "denom"), chain),
    }


def _begin_redelegate(p: dict, chain: ChainConfig) -> dict:
    return {
        "delegator_address": _req(p, "delegator_address"),
        "validator_src_address": _req(p, "validator_src_address"),
        "validator_dst_address": _req(p, "validator_dst_address"),
        "amount": make_coin(_req(p, "amount"), _req(p, "denom"), chain),
    }


def _withdraw_reward(p: dict, chain: ChainConfig) -> dict:
    return {
        "delegator_address": _req(p, "delegator_address"),
        "validator_address": _req(p, "validator_address"),
    }


def _modify_withdraw_address(p: dict, chain: ChainConfig) -> dict:
    return {
        "delegator_address": _req(p, "delegator_address"),
        "withdraw_address": _req(p, "withdraw_address"),
    }


def _register_beacon(p: dict, chain: ChainConfig) -> dict:
    return {
        "moniker": _req(p, "moniker"),
        "name": p.get("name", ""),
        "owner": _req(p, "owner"),
    }


def _record_beacon_timestamp(p: dict, chain: ChainConfig) -> dict:
    return {
        "beacon_id": _uint(_req(p, "beacon_id"), "beacon_id"),
        "hash": _req(p, "hash"),
        "submit_time": _uint(_req(p, "submit_time"), "submit_time"),
        "owner": _req(p, "owner"),
    }


def _register_wrkchain(p: dict, chain: ChainConfig) -> dict:
    return {
        "moniker": _req(p, "moniker"),
        "name": p.get("name", ""),
        "genesis": p.get("genesis", ""),
        "type": _req(p, "type"),
        "owner": _req(p, "owner"),
    }


def _record_wrkchain_block(p: dict, chain: ChainConfig) -> dict:
    return {
        "wrkchain_id": _uint(_req(p, "wrkchain_id"), "wrkchain_id"),
        "height": _uint(_req(p, "height"), "height"),
        "blockhash": _req(p, "blockhash"),
        "parenthash": p.get("parenthash", ""),
        "hash1": p.get("hash1", ""),
        "hash2": p.get("hash2", ""),
        "hash3": p.get("hash3", ""),
        "owner": _req(p, "owner"),
    }


_BUILDERS: dict[MsgType, Callable[[dict, ChainConfig], dict]] = {
    MsgType.MSG_SEND: _send,
    MsgType.PURCHASE_UND: _purchase_und,
    MsgType.MSG_DELEGATE: _delegation,
    MsgType.MSG_UNDELEGATE: _delegation,
    MsgType.MSG_BEGIN_REDELEGATE: _begin_redelegate,
    MsgType.MSG_WITHDRAW_DELEGATION_REWARD: _withdraw_reward,
    MsgType.MSG_MODIFY_WITHDRAW_ADDRESS: _modify_withdraw_address,
    MsgType.REGISTER_BEACON: _register_beacon,
    MsgType.RECORD_BEACON_TIMESTAMP: _record_beacon_timestamp,
    MsgType.REGISTER_WRKCHAIN: _register_wrkchain,
    MsgType.RECORD_WRKCHAIN_BLOCK: _record_wrkchain_block,
}


def build_message(type_tag: MsgType | str, params: dict,
                  chain: ChainConfig = _DEFAULT_CHAIN) -> dict:
    """Shape *params* into ``{"type": <wire name>, "value": {...}}``."""
    try:
        msg_type = MsgType(type_tag)
    except ValueError:
        raise UnsupportedMessageError(type_tag) from None
    return {"type": WIRE_TYPES[msg_type], "value": _BUILDERS[msg_type](params, chain)}
