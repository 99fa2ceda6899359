"""
Unit tests for the disclosure oracle.
"""

import pytest

from shieldpool.core.errors import AccessDenied, InvalidDisclosureProof
from shieldpool.core.field import UINT64_MAX
from shieldpool.ledger import (
    ConfidentialLedger,
    PlaintextDecryptionOracle,
    decode_clear_amount,
    encode_clear_amount,
)


class TestClearAmountEncoding:
    """Tests for the 32-byte cleartext encoding."""

    def test_encoding_is_32_byte_big_endian(self) -> None:
        """Test the ABI-style layout."""
        data = encode_clear_amount(258)
        assert len(data) == 32
        assert data[-2:] == b"\x01\x02"
        assert decode_clear_amount(data) == 258

    def test_encode_rejects_over_u64(self) -> None:
        """Test the u64 bound on encoding."""
        with pytest.raises(ValueError):
            encode_clear_amount(UINT64_MAX + 1)

    def test_decode_rejects_wrong_length(self) -> None:
        """Test the length check."""
        with pytest.raises(InvalidDisclosureProof):
            decode_clear_amount(b"\x00" * 8)

    def test_decode_rejects_over_u64(self) -> None:
        """Test the u64 bound on decoding."""
        with pytest.raises(InvalidDisclosureProof):
            decode_clear_amount((UINT64_MAX + 1).to_bytes(32, "big"))


class TestPlaintextDecryptionOracle:
    """Tests for PlaintextDecryptionOracle."""

    def test_decrypt_disclosed_handle(
        self, ledger: ConfidentialLedger, oracle: PlaintextDecryptionOracle, alice: str
    ) -> None:
        """Test that a disclosed amount decrypts with a verifiable proof."""
        moved = ledger.mint(alice, ledger.arithmetic.encrypt(77))
        ledger.request_disclosure(moved)

        clear, proof = oracle.decrypt(moved)
        assert decode_clear_amount(clear) == 77
        assert oracle.verify(moved, clear, proof)

    def test_decrypt_requires_disclosure(
        self, ledger: ConfidentialLedger, oracle: PlaintextDecryptionOracle, alice: str
    ) -> None:
        """Test that undisclosed handles stay private."""
        moved = ledger.mint(alice, ledger.arithmetic.encrypt(77))
        with pytest.raises(AccessDenied):
            oracle.decrypt(moved)

    def test_forged_cleartext_is_rejected(
        self, ledger: ConfidentialLedger, oracle: PlaintextDecryptionOracle, alice: str
    ) -> None:
        """Test that the proof binds the cleartext."""
        moved = ledger.mint(alice, ledger.arithmetic.encrypt(0))
        ledger.request_disclosure(moved)

        _, proof = oracle.decrypt(moved)
        assert not oracle.verify(moved, encode_clear_amount(1000), proof)

    def test_proof_is_bound_to_handle(
        self, ledger: ConfidentialLedger, oracle: PlaintextDecryptionOracle, alice: str
    ) -> None:
        """Test that a proof cannot be replayed for another handle."""
        first = ledger.mint(alice, ledger.arithmetic.encrypt(5))
        second = ledger.mint(alice, ledger.arithmetic.encrypt(5))
        ledger.request_disclosure(first)
        ledger.request_disclosure(second)

        clear, proof = oracle.decrypt(first)
        assert not oracle.verify(second, clear, proof)

    def test_other_key_is_rejected(
        self, ledger: ConfidentialLedger, oracle: PlaintextDecryptionOracle, alice: str
    ) -> None:
        """Test that attestations from another key do not verify."""
        moved = ledger.mint(alice, ledger.arithmetic.encrypt(5))
        ledger.request_disclosure(moved)

        rogue = PlaintextDecryptionOracle(ledger, signing_key=b"another-key")
        clear, proof = rogue.decrypt(moved)
        assert not oracle.verify(moved, clear, proof)

    def test_empty_signing_key(self, ledger: ConfidentialLedger) -> None:
        """Test that an empty key is refused."""
        with pytest.raises(ValueError):
            PlaintextDecryptionOracle(ledger, signing_key=b"")
