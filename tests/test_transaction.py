"""
Tests for und_core.transaction — sign document, state machine, envelope.
"""

import base64
import json

import pytest

from und_core.crypto_utils import get_public_key_from_private_key, verify_signature
from und_core.errors import SigningError, ValidationError
from und_core.msg import MsgType, build_message
from und_core.signers import PUBKEY_TYPE, LocalKeySigner
from und_core.transaction import Transaction, TxState, check_broadcast_mode

from conftest import ADDRESS, CHAIN_ID, FEE, PRIVATE_KEY

RECIPIENT = "und1x8pl6wzqf9atkm77ymc5vn5dnpl5xytmn200xy"


def _send_msg(amount="1000"):
    return build_message(MsgType.MSG_SEND, {
        "from": ADDRESS, "to": RECIPIENT, "amount": amount, "denom": "nund",
    })


def _tx(**kwargs):
    params = {
        "chain_id": CHAIN_ID,
        "msg": _send_msg(),
        "fee": FEE,
        "memo": "hello",
        "account_number": 7,
        "sequence": 3,
    }
    params.update(kwargs)
    return Transaction(**params)


class TestConstruction:
    def test_requires_chain_id(self):
        with pytest.raises(ValidationError, match="chain id"):
            Transaction(chain_id="", msg=_send_msg(), fee=FEE)

    def test_requires_a_message(self):
        with pytest.raises(ValidationError):
            Transaction(chain_id=CHAIN_ID, fee=FEE)

    def test_defaults(self):
        tx = Transaction(chain_id=CHAIN_ID, msg=_send_msg())
        assert tx.account_number == 0
        assert tx.sequence == 0
        assert tx.memo == ""
        assert tx.state is TxState.ASSEMBLED

    def test_none_numbers_default_to_zero(self):
        tx = Transaction(chain_id=CHAIN_ID, msg=_send_msg(), account_number=None, sequence=None)
        assert tx.sign_doc["account_number"] == "0"
        assert tx.sign_doc["sequence"] == "0"

    def test_inputs_are_copied(self):
        msg = _send_msg()
        tx = Transaction(chain_id=CHAIN_ID, msg=msg, fee=FEE)
        msg["value"]["to_address"] = "changed"
        assert tx.msgs[0]["value"]["to_address"] == RECIPIENT

    def test_multi_message(self):
        tx = Transaction(chain_id=CHAIN_ID, msgs=[_send_msg("1"), _send_msg("2")], fee=FEE)
        assert len(tx.sign_doc["msgs"]) == 2


class TestSignDoc:
    def test_fields_exactly(self):
        assert sorted(_tx().sign_doc) == [
            "account_number", "chain_id", "fee", "memo", "msgs", "sequence",
        ]

    def test_numbers_are_strings(self):
        doc = _tx(account_number="7", sequence=3).sign_doc
        assert doc["account_number"] == "7"
        assert doc["sequence"] == "3"

    def test_sign_bytes_are_canonical(self):
        raw = _tx().sign_bytes()
        assert raw.startswith(b'{"account_number":"7","chain_id":"' + CHAIN_ID.encode())
        assert b" " not in raw.replace(b"hello", b"")
        assert json.loads(raw) == _tx().sign_doc

    def test_sign_bytes_stable(self):
        assert _tx().sign_bytes() == _tx().sign_bytes()


class TestStateMachine:
    @pytest.mark.asyncio
    async def test_sign_with_local_key(self):
        tx = _tx()
        await tx.sign(LocalKeySigner(PRIVATE_KEY))
        assert tx.state is TxState.SIGNED
        sig = tx.signature
        assert sig["pub_key"]["type"] == PUBKEY_TYPE
        pub = base64.b64decode(sig["pub_key"]["value"])
        assert pub == get_public_key_from_private_key(PRIVATE_KEY)
        raw_sig = base64.b64decode(sig["signature"])
        assert len(raw_sig) == 64
        assert verify_signature(raw_sig.hex(), tx.sign_bytes().hex(), pub)

    @pytest.mark.asyncio
    async def test_sign_without_signer(self):
        with pytest.raises(SigningError):
            await _tx().sign(None)

    @pytest.mark.asyncio
    async def test_sign_twice(self):
        tx = _tx()
        signer = LocalKeySigner(PRIVATE_KEY)
        await tx.sign(signer)
        with pytest.raises(SigningError, match="already signed"):
            await tx.sign(signer)

    def test_envelope_before_sign(self):
        with pytest.raises(SigningError):
            _tx().gen_signed_tx()

    @pytest.mark.asyncio
    async def test_envelope_shape(self):
        tx = _tx()
        await tx.sign(LocalKeySigner(PRIVATE_KEY))
        env = tx.gen_signed_tx("block")
        assert env["mode"] == "block"
        assert sorted(env["tx"]) == ["fee", "memo", "msg", "signatures"]
        assert env["tx"]["msg"] == [_send_msg()]
        assert env["tx"]["memo"] == "hello"
        assert env["tx"]["signatures"] == [tx.signature]
        assert tx.state is TxState.ENVELOPED

    @pytest.mark.asyncio
    async def test_envelope_repeatable(self):
        tx = _tx()
        await tx.sign(LocalKeySigner(PRIVATE_KEY))
        assert tx.gen_signed_tx("sync") == tx.gen_signed_tx("sync")

    @pytest.mark.asyncio
    async def test_envelope_rejects_bad_mode(self):
        tx = _tx()
        await tx.sign(LocalKeySigner(PRIVATE_KEY))
        with pytest.raises(ValidationError):
            tx.gen_signed_tx("eventually")

    @pytest.mark.asyncio
    async def test_to_dict_includes_state(self):
        tx = _tx()
        assert tx.to_dict()["state"] == "assembled"
        await tx.sign(LocalKeySigner(PRIVATE_KEY))
        d = tx.to_dict()
        assert d["state"] == "signed"
        assert "signature" in d


class TestBroadcastMode:
    def test_valid_modes(self):
        for mode in ("sync", "async", "block"):
            assert check_broadcast_mode(mode) == mode

    def test_invalid_mode(self):
        with pytest.raises(ValidationError, match="broadcast mode"):
            check_broadcast_mode("SYNC")
