"""
UND Mainchain client.

:class:`UndClient` holds one session (chain id, active key or device,
cached account number, broadcast mode, signing and broadcast delegates)
and runs every write operation through the same pipeline:

    validate -> build message -> resolve account_number/sequence
             -> assemble -> sign -> envelope -> broadcast

Result discipline:

* Bad input, key material or device state raises
  (:class:`~und_core.errors.ValidationError`,
  :class:`~und_core.errors.SigningError`, ...).
* Everything that reaches the node returns ``{"status", "result"}``.
  Network failures become ``{"status": 503, "result": {"error": ...}}``
  and client-side rejections on read paths become status 400.

Usage::

    async with UndClient("http://localhost:1317") as client:
        await client.set_private_key(pk)
        res = await client.transfer_und("und1...", "1.5", fee, denom="und")
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Iterable, Mapping

from und_core.config import UndConfig
from und_core.crypto_utils import (
    check_address as _check_address,
    generate_private_key,
    get_address_from_private_key,
)
from und_core.errors import SigningError, TransportError, ValidationError
from und_core.http import HttpRequest
from und_core.msg import MsgType, build_message
from und_core.signers import (
    Broadcaster,
    DeviceSigner,
    DeviceTransport,
    ImmediateBroadcaster,
    LocalKeySigner,
    Signer,
)
from und_core.transaction import Transaction, check_broadcast_mode
from und_core.validation import (
    check_address_param,
    check_fee,
    check_not_empty,
    check_number,
)
from und_core.wallet import (
    generate_key_store,
    generate_mnemonic,
    get_private_key_from_key_store,
    get_private_key_from_mnemonic,
)

logger = logging.getLogger("und_core.client")


@dataclass(frozen=True)
class TxOptions:
    """Per-call options shared by every write operation."""
    from_address: str | None = None   # defaults to the active address
    memo: str = ""
    sequence: int | None = None       # fetched from the node when None
    denom: str | None = None          # defaults to config.tx.default_denom


def _resolve_options(options: TxOptions | None, overrides: dict,
                     default_denom: str = "nund") -> TxOptions:
    opts = options or TxOptions()
    known = {f.name for f in fields(TxOptions)}
    unknown = set(overrides) - known
    if unknown:
        raise ValidationError(f"unknown transaction option(s): {', '.join(sorted(unknown))}")
    opts = replace(opts, **overrides) if overrides else opts
    if opts.denom is None:
        opts = replace(opts, denom=default_denom)
    return opts


def _error_result(message: str, status: int = 503) -> dict:
    return {"status": status, "result": {"error": message}}


def _account_value(response: dict) -> dict:
    """``result.result.account.value`` of an /auth/accounts response."""
    if response.get("status") != 200:
        error = response.get("result")
        if isinstance(error, dict):
            error = error.get("error", error)
        raise TransportError(f"account lookup failed: {error}", response.get("status"))
    try:
        return response["result"]["result"]["account"]["value"]
    except (KeyError, TypeError):
        raise TransportError("account lookup returned an unexpected body", 502) from None


class UndClient:
    """Client session against one UND node."""

    def __init__(self, server_url: str | None = None, config: UndConfig | None = None,
                 http: HttpRequest | None = None):
        self.config = config or UndConfig()
        self.chain = self.config.chain
        server_url = server_url or self.config.http.server_url
        if not server_url and http is None:
            raise ValidationError("UND Mainchain server should not be empty")
        self.server_url = server_url or getattr(http, "server", "")
        self._http = http or HttpRequest(server_url, timeout=self.config.http.timeout_seconds)

        self.chain_id: str = self.chain.chain_id
        self.address: str | None = None
        self.private_key: str | None = None
        self.account_number: int | None = None
        self.broadcast_mode: str = check_broadcast_mode(self.config.tx.broadcast_mode)
        self.signer: Signer | None = None
        self.broadcaster: Broadcaster = ImmediateBroadcaster()
        self._account_lookup: asyncio.Future | None = None

    # ==================================================================
    #  Session
    # ==================================================================

    async def init_chain(self) -> UndClient:
        """Fetch the chain id from the node once; a configured id wins."""
        if not self.chain_id:
            resp = await self._http.get(self.chain.api_node_info)
            try:
                self.chain_id = resp["result"]["node_info"]["network"]
            except (KeyError, TypeError):
                raise TransportError("node info did not contain a chain id",
                                     resp.get("status")) from None
            logger.info("Initialised chain_id=%s from %s", self.chain_id, self.server_url)
        return self

    def set_private_key(self, private_key: str | bytes, local_only: bool = False) -> asyncio.Future:
        """
        Make *private_key* the active signing key.

        The key, address and default signer change immediately.  Unless
        *local_only*, the account number is looked up in the background;
        the returned awaitable resolves to this client once that lookup
        is done, and transaction methods wait for it themselves.

        Must be called from inside a running event loop.
        """
        loop = asyncio.get_running_loop()
        if isinstance(private_key, bytes):
            private_key = private_key.hex()
        private_key = private_key.lower()

        if private_key == self.private_key:
            if self._account_lookup is not None:
                return self._account_lookup
            return self._done(loop)

        signer = LocalKeySigner(private_key, self.chain.bech32_prefix)
        self.private_key = private_key
        self.address = signer.address
        self.signer = signer
        self.account_number = None
        logger.info("Active address set to %s", self.address)

        if local_only:
            self._account_lookup = None
            return self._done(loop)
        self._account_lookup = loop.create_task(self._lookup_account_number(signer.address))
        return self._account_lookup

    def _done(self, loop: asyncio.AbstractEventLoop) -> asyncio.Future:
        fut = loop.create_future()
        fut.set_result(self)
        return fut

    async def _lookup_account_number(self, address: str) -> UndClient:
        try:
            value = _account_value(await self._http.get(
                f"{self.chain.api_query_account}/{address}"))
        except TransportError as exc:
            # Left unset; the next transaction fetches it again.
            logger.warning("Account number lookup for %s failed: %s", address, exc)
            return self
        if address == self.address:
            self.account_number = int(value["account_number"])
            logger.debug("account_number=%d for %s", self.account_number, address)
        return self

    def set_account_number(self, account_number: int) -> UndClient:
        self.account_number = int(account_number)
        return self

    async def use_device_signer(self, transport: DeviceTransport, account_index: int = 0,
                                local_only: bool = False) -> UndClient:
        """Sign with a hardware device; its address becomes the active one."""
        signer = DeviceSigner(transport, account_index, self.chain)
        await signer.connect()
        self.signer = signer
        self.private_key = None
        self.address = signer.address
        self.account_number = None
        self._account_lookup = None
        if not local_only:
            await self._lookup_account_number(signer.address)
        return self

    def set_signing_delegate(self, signer: Signer) -> UndClient:
        if not isinstance(signer, Signer):
            raise ValidationError("signing delegate must be a Signer")
        if signer.address and signer.address != self.address:
            self.address = signer.address
            self.account_number = None
        self.signer = signer
        return self

    def set_broadcast_delegate(self, broadcaster: Broadcaster) -> UndClient:
        if not isinstance(broadcaster, Broadcaster):
            raise ValidationError("broadcast delegate must be a Broadcaster")
        self.broadcaster = broadcaster
        return self

    def use_default_signing_delegate(self) -> UndClient:
        self.signer = (
            LocalKeySigner(self.private_key, self.chain.bech32_prefix)
            if self.private_key else None
        )
        return self

    def use_default_broadcast_delegate(self) -> UndClient:
        self.broadcaster = ImmediateBroadcaster()
        return self

    def set_broadcast_mode(self, mode: str) -> UndClient:
        self.broadcast_mode = check_broadcast_mode(mode)
        return self

    def get_client_key_address(self) -> str:
        if not self.private_key:
            raise SigningError("no private key is set on this client")
        self.address = get_address_from_private_key(self.private_key, self.chain.bech32_prefix)
        return self.address

    async def close(self) -> None:
        if self._account_lookup is not None and not self._account_lookup.done():
            self._account_lookup.cancel()
        await self._http.close()

    async def __aenter__(self) -> UndClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ==================================================================
    #  Transaction pipeline
    # ==================================================================

    def _sender(self, opts: TxOptions, name: str) -> str:
        return check_address_param(opts.from_address or self.address, self.chain.bech32_prefix, name)

    def _validator(self, address: str, name: str) -> str:
        return check_address_param(address, self.chain.bech32_val_prefix, name)

    async def _prepare_tx(self, msg: dict, address: str, fee: dict,
                          sequence: int | None = None, memo: str = "") -> dict:
        if self._account_lookup is not None and not self._account_lookup.done():
            await self._account_lookup

        account_number = self.account_number if address == self.address else None
        if account_number is None or sequence is None:
            value = _account_value(await self._http.get(
                f"{self.chain.api_query_account}/{address}"))
            if sequence is None:
                sequence = int(value.get("sequence") or 0)
            if account_number is None:
                account_number = int(value.get("account_number") or 0)
                if address == self.address and self.account_number is None:
                    self.account_number = account_number

        if not self.chain_id:
            await self.init_chain()

        tx = Transaction(
            chain_id=self.chain_id,
            msg=msg,
            fee=fee,
            memo=memo,
            account_number=account_number,
            sequence=sequence,
        )
        await tx.sign(self.signer)
        return tx.gen_signed_tx(self.broadcast_mode)

    async def _submit(self, msg_type: MsgType, params: dict, address: str,
                      fee: dict, opts: TxOptions) -> dict:
        msg = build_message(msg_type, params, self.chain)
        if self.signer is None:
            raise SigningError("no private key or device set for signing")
        try:
            signed_tx = await self._prepare_tx(msg, address, fee, opts.sequence, opts.memo)
            logger.info("Broadcasting %s from %s mode=%s", msg["type"], address, self.broadcast_mode)
            return await self.broadcaster.broadcast(self, signed_tx)
        except TransportError as exc:
            logger.warning("%s from %s failed: %s", msg_type.value, address, exc)
            return _error_result(str(exc), exc.status or 503)

    async def send_transaction(self, signed_tx: dict) -> dict:
        """POST a signed envelope to the node's broadcast endpoint."""
        try:
            return await self._http.post(
                self.chain.api_broadcast_tx,
                data=signed_tx,
                headers={"content-type": "text/plain"},
            )
        except TransportError as exc:
            logger.warning("Broadcast failed: %s", exc)
            return _error_result(str(exc), exc.status or 503)

    # ==================================================================
    #  Write operations
    # ==================================================================

    async def transfer_und(self, to_address: str, amount, fee: dict,
                           options: TxOptions | None = None, **kwargs) -> dict:
        opts = _resolve_options(options, kwargs, self.config.tx.default_denom)
        from_address = self._sender(opts, "fromAddress")
        check_address_param(to_address, self.chain.bech32_prefix, "toAddress")
        check_number(amount, "amount")
        check_fee(fee)
        params = {"from": from_address, "to": to_address, "amount": amount, "denom": opts.denom}
        return await self._submit(MsgType.MSG_SEND, params, from_address, fee, opts)

    async def raise_enterprise_po(self, amount, fee: dict,
                                  options: TxOptions | None = None, **kwargs) -> dict:
        opts = _resolve_options(options, kwargs, self.config.tx.default_denom)
        from_address = self._sender(opts, "fromAddress")
        check_number(amount, "amount")
        check_fee(fee)
        params = {"from": from_address, "amount": amount, "denom": opts.denom}
        return await self._submit(MsgType.PURCHASE_UND, params, from_address, fee, opts)

    async def delegate(self, validator: str, amount, fee: dict,
                       options: TxOptions | None = None, **kwargs) -> dict:
        opts = _resolve_options(options, kwargs, self.config.tx.default_denom)
        delegator = self._sender(opts, "delegator")
        self._validator(validator, "validator")
        check_number(amount, "amount")
        check_fee(fee)
        params = {
            "delegator_address": delegator,
            "validator_address": validator,
            "amount": amount,
            "denom": opts.denom,
        }
        return await self._submit(MsgType.MSG_DELEGATE, params, delegator, fee, opts)

    async def undelegate(self, validator: str, amount, fee: dict,
                         options: TxOptions | None = None, **kwargs) -> dict:
        opts = _resolve_options(options, kwargs, self.config.tx.default_denom)
        delegator = self._sender(opts, "delegator")
        self._validator(validator, "validator")
        check_number(amount, "amount")
        check_fee(fee)
        params = {
            "delegator_address": delegator,
            "validator_address": validator,
            "amount": amount,
            "denom": opts.denom,
        }
        return await self._submit(MsgType.MSG_UNDELEGATE, params, delegator, fee, opts)

    async def redelegate(self, validator_from: str, validator_to: str, amount, fee: dict,
                         options: TxOptions | None = None, **kwargs) -> dict:
        opts = _resolve_options(options, kwargs, self.config.tx.default_denom)
        delegator = self._sender(opts, "delegator")
        self._validator(validator_from, "validatorFrom")
        self._validator(validator_to, "validatorTo")
        check_number(amount, "amount")
        check_fee(fee)
        params = {
            "delegator_address": delegator,
            "validator_src_address": validator_from,
            "validator_dst_address": validator_to,
            "amount": amount,
            "denom": opts.denom,
        }
        return await self._submit(MsgType.MSG_BEGIN_REDELEGATE, params, delegator, fee, opts)

    async def withdraw_delegation_reward(self, validator: str, fee: dict,
                                         options: TxOptions | None = None, **kwargs) -> dict:
        opts = _resolve_options(options, kwargs, self.config.tx.default_denom)
        delegator = self._sender(opts, "delegator")
        self._validator(validator, "validator")
        check_fee(fee)
        params = {"delegator_address": delegator, "validator_address": validator}
        return await self._submit(MsgType.MSG_WITHDRAW_DELEGATION_REWARD, params, delegator, fee, opts)

    async def modify_withdraw_address(self, withdraw_address: str, fee: dict,
                                      options: TxOptions | None = None, **kwargs) -> dict:
        opts = _resolve_options(options, kwargs, self.config.tx.default_denom)
        delegator = self._sender(opts, "delegator")
        check_address_param(withdraw_address, self.chain.bech32_prefix, "withdrawAddress")
        check_fee(fee)
        params = {"delegator_address": delegator, "withdraw_address": withdraw_address}
        return await self._submit(MsgType.MSG_MODIFY_WITHDRAW_ADDRESS, params, delegator, fee, opts)

    async def register_beacon(self, moniker: str, name: str, fee: dict,
                              options: TxOptions | None = None, **kwargs) -> dict:
        opts = _resolve_options(options, kwargs, self.config.tx.default_denom)
        owner = self._sender(opts, "owner")
        check_not_empty(moniker, "moniker")
        check_fee(fee)
        params = {"moniker": moniker, "name": name or "", "owner": owner}
        return await self._submit(MsgType.REGISTER_BEACON, params, owner, fee, opts)

    async def record_beacon_timestamp(self, beacon_id: int, hash: str, submit_time: int,
                                      fee: dict, options: TxOptions | None = None,
                                      **kwargs) -> dict:
        opts = _resolve_options(options, kwargs, self.config.tx.default_denom)
        owner = self._sender(opts, "owner")
        check_number(beacon_id, "beaconId")
        check_not_empty(hash, "hash")
        check_number(submit_time, "submitTime")
        check_fee(fee)
        params = {
            "beacon_id": beacon_id,
            "hash": hash,
            "submit_time": submit_time,
            "owner": owner,
        }
        return await self._submit(MsgType.RECORD_BEACON_TIMESTAMP, params, owner, fee, opts)

    async def register_wrkchain(self, moniker: str, name: str, genesis_hash: str,
                                base_type: str, fee: dict,
                                options: TxOptions | None = None, **kwargs) -> dict:
        opts = _resolve_options(options, kwargs, self.config.tx.default_denom)
        owner = self._sender(opts, "owner")
        check_not_empty(moniker, "moniker")
        check_not_empty(base_type, "baseType")
        check_fee(fee)
        params = {
            "moniker": moniker,
            "name": name or "",
            "genesis": genesis_hash or "",
            "type": base_type,
            "owner": owner,
        }
        return await self._submit(MsgType.REGISTER_WRKCHAIN, params, owner, fee, opts)

    async def record_wrkchain_block(self, wrkchain_id: int, height: int, block_hash: str,
                                    fee: dict, parent_hash: str = "", hash1: str = "",
                                    hash2: str = "", hash3: str = "",
                                    options: TxOptions | None = None, **kwargs) -> dict:
        opts = _resolve_options(options, kwargs, self.config.tx.default_denom)
        owner = self._sender(opts, "owner")
        check_number(wrkchain_id, "wrkchainId")
        check_number(height, "height")
        check_not_empty(block_hash, "blockHash")
        check_fee(fee)
        params = {
            "wrkchain_id": wrkchain_id,
            "height": height,
            "blockhash": block_hash,
            "parenthash": parent_hash,
            "hash1": hash1,
            "hash2": hash2,
            "hash3": hash3,
            "owner": owner,
        }
        return await self._submit(MsgType.RECORD_WRKCHAIN_BLOCK, params, owner, fee, opts)

    # ==================================================================
    #  Read operations
    # ==================================================================

    async def _query(self, path: str, params=None) -> dict:
        try:
            return await self._http.get(path, params=params)
        except TransportError as exc:
            logger.warning("Query %s failed: %s", path, exc)
            return _error_result(str(exc), exc.status or 503)

    def _address_or_none(self, address: str | None) -> str | None:
        return address or self.address

    async def get_account(self, address: str | None = None) -> dict:
        address = self._address_or_none(address)
        if not address:
            return _error_result("address should not be empty", 400)
        return await self._query(f"{self.chain.api_query_account}/{address}")

    async def get_balance(self, address: str | None = None) -> dict:
        """``{"status", "result": [coin, ...]}`` for *address*."""
        resp = await self.get_account(address)
        if resp["status"] != 200:
            return resp
        try:
            coins = resp["result"]["result"]["account"]["value"].get("coins") or []
        except (KeyError, TypeError, AttributeError):
            return _error_result("account response did not contain coins", 502)
        return {"status": 200, "result": coins}

    async def get_enterprise_locked(self, address: str | None = None) -> dict:
        address = self._address_or_none(address)
        if not address:
            return _error_result("address should not be empty", 400)
        return await self._query(f"{self.chain.api_query_ent_locked}/{address}")

    async def search_txs(self, filters: Mapping[str, Any] | Iterable[tuple[str, Any]],
                         page: int = 1, limit: int = 100) -> dict:
        """Filtered transaction search; *filters* are forwarded in the order given."""
        pairs = list(filters.items()) if isinstance(filters, Mapping) else list(filters or [])
        if not pairs:
            return _error_result("at least one filter is required", 400)
        params = [(str(k), str(v)) for k, v in pairs]
        params += [("page", str(page)), ("limit", str(limit))]
        return await self._query(self.chain.api_query_txs, params)

    async def get_transactions(self, address: str | None = None, page: int = 1,
                               limit: int = 100) -> dict:
        address = self._address_or_none(address)
        if not address:
            return _error_result("address should not be empty", 400)
        return await self.search_txs([("message.sender", address)], page, limit)

    async def get_transactions_received(self, address: str | None = None, page: int = 1,
                                        limit: int = 100) -> dict:
        address = self._address_or_none(address)
        if not address:
            return _error_result("address should not be empty", 400)
        return await self.search_txs([("transfer.recipient", address)], page, limit)

    async def get_tx(self, tx_hash: str) -> dict:
        if not tx_hash:
            return _error_result("hash should not be empty", 400)
        return await self._query(f"{self.chain.api_query_tx}/{tx_hash}")

    async def get_enterprise_pos(self, address: str | None = None, page: int = 1,
                                 limit: int = 100) -> dict:
        address = self._address_or_none(address)
        if not address:
            return _error_result("address should not be empty", 400)
        params = [("purchaser", address), ("page", str(page)), ("limit", str(limit))]
        return await self._query(self.chain.api_query_ent_pos, params)

    async def _delegator_query(self, address: str | None, suffix: str,
                               val_address: str = "", prefix: str | None = None) -> dict:
        address = self._address_or_none(address)
        if not address:
            return _error_result("address should not be empty", 400)
        prefix = prefix or self.chain.api_query_staking_delegators_prefix
        path = f"{prefix}/{address}/{suffix}"
        if val_address:
            path += f"/{val_address}"
        return await self._query(path)

    async def get_delegations(self, address: str | None = None, val_address: str = "") -> dict:
        return await self._delegator_query(
            address, self.chain.api_query_staking_delegations_suffix, val_address)

    async def get_unbonding_delegations(self, address: str | None = None,
                                        val_address: str = "") -> dict:
        return await self._delegator_query(
            address, self.chain.api_query_staking_unbonding_delegations_suffix, val_address)

    async def get_bonded_validators(self, address: str | None = None,
                                    val_address: str = "") -> dict:
        return await self._delegator_query(
            address, self.chain.api_query_staking_validators_suffix, val_address)

    async def get_delegator_rewards(self, address: str | None = None,
                                    val_address: str = "") -> dict:
        return await self._delegator_query(
            address, self.chain.api_query_distribution_rewards_suffix, val_address,
            prefix=self.chain.api_query_distribution_delegators_prefix)

    async def get_delegator_withdraw_address(self, address: str | None = None) -> dict:
        return await self._delegator_query(
            address, self.chain.api_query_distribution_withdraw_address_suffix,
            prefix=self.chain.api_query_distribution_delegators_prefix)

    async def get_validators(self, status: str = "bonded", page: int = 1, limit: int = 100,
                             val_address: str = "") -> dict:
        prefix = self.chain.api_query_staking_validators_prefix
        if val_address:
            return await self._query(f"{prefix}/{val_address}")
        params = [("status", status), ("page", str(page)), ("limit", str(limit))]
        return await self._query(prefix, params)

    async def _validator_query(self, val_address: str, prefix: str, suffix: str = "") -> dict:
        if not val_address:
            return _error_result("validator address should not be empty", 400)
        path = f"{prefix}/{val_address}"
        if suffix:
            path += f"/{suffix}"
        return await self._query(path)

    async def get_validator_delegations(self, val_address: str) -> dict:
        return await self._validator_query(
            val_address, self.chain.api_query_staking_validators_prefix,
            self.chain.api_query_staking_delegations_suffix)

    async def get_validator_unbonding_delegations(self, val_address: str) -> dict:
        return await self._validator_query(
            val_address, self.chain.api_query_staking_validators_prefix,
            self.chain.api_query_staking_unbonding_delegations_suffix)

    async def get_redelegations(self, del_address: str = "", val_src_address: str = "",
                                val_dst_address: str = "") -> dict:
        params = [
            ("delegator", del_address),
            ("validator_from", val_src_address),
            ("validator_to", val_dst_address),
        ]
        return await self._query(self.chain.api_query_staking_redelegations, params)

    async def get_validator_distribution_info(self, val_address: str) -> dict:
        return await self._validator_query(
            val_address, self.chain.api_query_distribution_validators_prefix)

    async def get_validator_distribution_outstanding_rewards(self, val_address: str) -> dict:
        return await self._validator_query(
            val_address, self.chain.api_query_distribution_validators_prefix,
            self.chain.api_query_distribution_outstanding_rewards_suffix)

    async def get_validator_distribution_rewards(self, val_address: str) -> dict:
        return await self._validator_query(
            val_address, self.chain.api_query_distribution_validators_prefix,
            self.chain.api_query_distribution_rewards_suffix)

    async def get_total_supply(self) -> dict:
        return await self._query(self.chain.api_query_supply)

    async def get_beacon_params(self) -> dict:
        return await self._query(self.chain.api_query_beacon_params)

    async def get_beacon(self, beacon_id: int) -> dict:
        if beacon_id in (None, ""):
            return _error_result("beacon id should not be empty", 400)
        return await self._query(f"{self.chain.api_query_beacon}/{beacon_id}")

    async def get_wrkchain_params(self) -> dict:
        return await self._query(self.chain.api_query_wrkchain_params)

    async def get_wrkchain(self, wrkchain_id: int) -> dict:
        if wrkchain_id in (None, ""):
            return _error_result("wrkchain id should not be empty", 400)
        return await self._query(f"{self.chain.api_query_wrkchain}/{wrkchain_id}")

    async def get_wrkchain_block(self, wrkchain_id: int, height: int) -> dict:
        if wrkchain_id in (None, "") or height in (None, ""):
            return _error_result("wrkchain id and height should not be empty", 400)
        return await self._query(f"{self.chain.api_query_wrkchain}/{wrkchain_id}/block/{height}")

    # ==================================================================
    #  Account helpers
    # ==================================================================

    def _account(self, private_key: str, **extra: Any) -> dict:
        account = {
            "private_key": private_key,
            "address": get_address_from_private_key(private_key, self.chain.bech32_prefix),
        }
        account.update(extra)
        return account

    def create_account(self) -> dict:
        return self._account(generate_private_key())

    def create_account_with_keystore(self, password: str) -> dict:
        if not password:
            raise ValidationError("password should not be empty")
        private_key = generate_private_key()
        return self._account(private_key, keystore=generate_key_store(private_key, password))

    def create_account_with_mnemonic(self) -> dict:
        mnemonic = generate_mnemonic()
        private_key = get_private_key_from_mnemonic(mnemonic, hd_path=self.chain.hd_path)
        return self._account(private_key, mnemonic=mnemonic)

    def recover_account_from_keystore(self, keystore: dict | str, password: str) -> dict:
        return self._account(get_private_key_from_key_store(keystore, password))

    def recover_account_from_mnemonic(self, mnemonic: str, index: int = 0) -> dict:
        return self._account(
            get_private_key_from_mnemonic(mnemonic, index=index, hd_path=self.chain.hd_path),
        )

    def recover_account_from_private_key(self, private_key: str | bytes) -> dict:
        if isinstance(private_key, bytes):
            private_key = private_key.hex()
        return self._account(private_key.lower())

    def check_address(self, address: str, prefix: str | None = None) -> bool:
        return _check_address(address, prefix or self.chain.bech32_prefix)

    def __repr__(self) -> str:
        return f"UndClient({self.server_url!r}, chain_id={self.chain_id!r}, address={self.address!r})"
