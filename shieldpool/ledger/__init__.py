"""
Confidential Ledger Module
==========================

Opaque u64 balances, oblivious arithmetic and disclosure.

Usage:
    from shieldpool.ledger import ConfidentialLedger, PlaintextArithmetic

    ledger = ConfidentialLedger(PlaintextArithmetic(), owner=pool_address)
    ledger.mint(alice, ledger.arithmetic.encrypt(100))
"""

from shieldpool.ledger.arithmetic import (
    OpaqueAmount,
    OpaqueBool,
    PlaintextArithmetic,
    SecureArithmetic,
)
from shieldpool.ledger.disclosure import (
    DisclosureVerifier,
    PlaintextDecryptionOracle,
    decode_clear_amount,
    encode_clear_amount,
)
from shieldpool.ledger.ledger import ConfidentialLedger

__all__ = [
    # Arithmetic
    "SecureArithmetic",
    "PlaintextArithmetic",
    "OpaqueAmount",
    "OpaqueBool",
    # Ledger
    "ConfidentialLedger",
    # Disclosure
    "DisclosureVerifier",
    "PlaintextDecryptionOracle",
    "encode_clear_amount",
    "decode_clear_amount",
]
