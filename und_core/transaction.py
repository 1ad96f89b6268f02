"""
Transaction assembly for UND Mainchain.

A :class:`Transaction` moves through three states and never back:

    ASSEMBLED --sign(signer)--> SIGNED --gen_signed_tx(mode)--> ENVELOPED

The sign document is the only data that gets canonicalised and signed:

    {account_number, chain_id, fee, memo, msgs, sequence}

with ``account_number`` and ``sequence`` rendered as decimal strings.
"""

from __future__ import annotations

import copy
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from und_core.encoder import convert_object_to_sign_bytes
from und_core.errors import SigningError, ValidationError

if TYPE_CHECKING:
    from und_core.signers import Signer

logger = logging.getLogger("und_core.transaction")

BROADCAST_MODES = ("sync", "async", "block")


class TxState(Enum):
    ASSEMBLED = "assembled"
    SIGNED = "signed"
    ENVELOPED = "enveloped"


def check_broadcast_mode(mode: str) -> str:
    if mode not in BROADCAST_MODES:
        raise ValidationError(
            f"invalid broadcast mode {mode!r}; expected one of {', '.join(BROADCAST_MODES)}",
        )
    return mode


class Transaction:
    """
    One transaction from assembly to broadcast envelope.

    ``msg`` is a single wire message; ``msgs`` may be given instead for a
    multi-message transaction.  Missing ``account_number``/``sequence``
    default to 0.
    """

    def __init__(
        self,
        chain_id: str,
        msg: dict | None = None,
        fee: dict | None = None,
        memo: str = "",
        account_number: int | str | None = 0,
        sequence: int | str | None = 0,
        msgs: list[dict] | None = None,
    ):
        if not chain_id:
            raise ValidationError("chain id should not be empty")
        if msgs is None:
            msgs = [msg] if msg is not None else []
        if not msgs:
            raise ValidationError("transaction needs at least one message")

        self.chain_id = chain_id
        self.msgs: list[dict] = copy.deepcopy(list(msgs))
        self.fee: dict = copy.deepcopy(fee) if fee is not None else {"amount": [], "gas": "0"}
        self.memo = memo or ""
        self.account_number = int(account_number or 0)
        self.sequence = int(sequence or 0)

        self.state = TxState.ASSEMBLED
        self.signature: dict | None = None

    # ---- signable content ----

    @property
    def sign_doc(self) -> dict:
        return {
            "account_number": str(self.account_number),
            "chain_id": self.chain_id,
            "fee": copy.deepcopy(self.fee),
            "memo": self.memo,
            "msgs": copy.deepcopy(self.msgs),
            "sequence": str(self.sequence),
        }

    def sign_bytes(self) -> bytes:
        return convert_object_to_sign_bytes(self.sign_doc)

    # ---- state transitions ----

    async def sign(self, signer: Signer | None) -> Transaction:
        if signer is None:
            raise SigningError("no private key or device set for signing")
        if self.state is not TxState.ASSEMBLED:
            raise SigningError("transaction is already signed")
        signature = await signer.sign(self)
        self.signature = signature
        self.state = TxState.SIGNED
        logger.debug(
            "Signed tx chain=%s account_number=%d sequence=%d msgs=%d",
            self.chain_id, self.account_number, self.sequence, len(self.msgs),
        )
        return self

    def gen_signed_tx(self, mode: str = "sync") -> dict:
        """Broadcast envelope ``{"tx": {...}, "mode": mode}``; repeatable."""
        if self.signature is None:
            raise SigningError("transaction must be signed before enveloping")
        check_broadcast_mode(mode)
        self.state = TxState.ENVELOPED
        return {
            "tx": {
                "msg": copy.deepcopy(self.msgs),
                "fee": copy.deepcopy(self.fee),
                "signatures": [copy.deepcopy(self.signature)],
                "memo": self.memo,
            },
            "mode": mode,
        }

    def to_dict(self) -> dict[str, Any]:
        d = self.sign_doc
        d["state"] = self.state.value
        if self.signature is not None:
            d["signature"] = copy.deepcopy(self.signature)
        return d

    def __repr__(self) -> str:
        return (
            f"Transaction(chain_id={self.chain_id!r}, msgs={len(self.msgs)}, "
            f"sequence={self.sequence}, state={self.state.value})"
        )
