"""
Disclosure Oracle
=================

Verifiable decryption of publicly disclosed amounts.

A decryption oracle answers with ``(clear_bytes, proof)`` for a handle
that was passed to ``request_disclosure``. The pool only consumes the
``DisclosureVerifier`` side. ``PlaintextDecryptionOracle`` implements both
sides with an HMAC-SHA256 attestation over the handle and the cleartext.

Version: 0.1.0
"""

import hashlib
import hmac
from typing import Protocol

from shieldpool.core.errors import AccessDenied, InvalidDisclosureProof
from shieldpool.core.field import UINT64_MAX
from shieldpool.ledger.arithmetic import OpaqueAmount
from shieldpool.ledger.ledger import ConfidentialLedger
from shieldpool.logging import get_logger

logger = get_logger(__name__)

CLEAR_AMOUNT_BYTES = 32


def encode_clear_amount(value: int) -> bytes:
    """ABI-style 32-byte big-endian encoding of a u64."""
    if not 0 <= value <= UINT64_MAX:
        raise ValueError("clear amount must fit in 64 bits")
    return value.to_bytes(CLEAR_AMOUNT_BYTES, byteorder="big")


def decode_clear_amount(data: bytes) -> int:
    """
    Decode an attested cleartext.

    Raises:
        InvalidDisclosureProof: Wrong length or value above 64 bits
    """
    if len(data) != CLEAR_AMOUNT_BYTES:
        raise InvalidDisclosureProof(f"cleartext must be {CLEAR_AMOUNT_BYTES} bytes")
    value = int.from_bytes(data, byteorder="big")
    if value > UINT64_MAX:
        raise InvalidDisclosureProof("cleartext does not fit in 64 bits")
    return value


class DisclosureVerifier(Protocol):
    """Checks that ``clear_bytes`` is the decryption of ``amount``."""

    def verify(self, amount: OpaqueAmount, clear_bytes: bytes, proof: bytes) -> bool: ...


class PlaintextDecryptionOracle:
    """
    Development oracle for the plaintext arithmetic backend.

    Usage:
        oracle = PlaintextDecryptionOracle(ledger, signing_key=b"...")
        clear, proof = oracle.decrypt(handle)
        assert oracle.verify(handle, clear, proof)
    """

    def __init__(self, ledger: ConfidentialLedger, signing_key: bytes) -> None:
        if not signing_key:
            raise ValueError("signing_key must not be empty")
        self._ledger = ledger
        self._signing_key = signing_key

    def _attest(self, amount: OpaqueAmount, clear_bytes: bytes) -> bytes:
        message = bytes.fromhex(amount.handle.removeprefix("0x")) + clear_bytes
        return hmac.new(self._signing_key, message, hashlib.sha256).digest()

    def decrypt(self, amount: OpaqueAmount) -> tuple[bytes, bytes]:
        """
        Decrypt a publicly disclosed handle.

        Raises:
            AccessDenied: The handle was never passed to request_disclosure
        """
        if not self._ledger.is_publicly_decryptable(amount):
            raise AccessDenied(
                f"{amount.handle} is not publicly decryptable",
                handle=amount.handle,
            )
        clear_bytes = encode_clear_amount(self._ledger.arithmetic.reveal(amount))
        return clear_bytes, self._attest(amount, clear_bytes)

    def verify(self, amount: OpaqueAmount, clear_bytes: bytes, proof: bytes) -> bool:
        expected = self._attest(amount, clear_bytes)
        valid = hmac.compare_digest(expected, proof)
        if not valid:
            logger.warning("disclosure_proof_mismatch", handle=amount.handle)
        return valid
