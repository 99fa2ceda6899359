"""
ZK-SNARK Data Models
====================

Pydantic models for Groth16 proofs and the wrap/withdraw public signals.

Version: 0.1.0
"""

from typing import Annotated

from pydantic import BaseModel, Field, field_validator

from shieldpool.core.field import address_to_int, as_field_element, normalize_address


# Order of the public signals of the wrapOrWithdraw circuit
SIGNAL_ORDER = ("root", "recipient", "nullifier_hash", "relayer", "fee", "refund")

G1Point = tuple[int, int]
G2Point = tuple[tuple[int, int], tuple[int, int]]

# One G2 coordinate: (c0, c1) in snarkjs order
Fp2Pair = Annotated[list[str], Field(min_length=2)]


class ZKProof(BaseModel):
    """
    A zero-knowledge proof.

    Compatible with snarkjs Groth16 proof format. ``pi_b`` keeps the
    snarkjs coordinate order; Solidity verifiers expect each G2
    coordinate pair reversed, see ``points``.
    """

    # Proof points (G1 and G2 elements)
    pi_a: list[str] = Field(..., min_length=2, description="Proof point A (G1)")
    pi_b: list[Fp2Pair] = Field(..., min_length=2, description="Proof point B (G2)")
    pi_c: list[str] = Field(..., min_length=2, description="Proof point C (G1)")

    # Protocol info
    protocol: str = Field(default="groth16")
    curve: str = Field(default="bn128")

    def points(self) -> tuple[G1Point, G2Point, G1Point]:
        """(pA, pB, pC) as integers, in verifier-contract order."""
        p_a = (int(self.pi_a[0]), int(self.pi_a[1]))
        p_b = (
            (int(self.pi_b[0][1]), int(self.pi_b[0][0])),
            (int(self.pi_b[1][1]), int(self.pi_b[1][0])),
        )
        p_c = (int(self.pi_c[0]), int(self.pi_c[1]))
        return p_a, p_b, p_c

    def to_calldata(self) -> list[int]:
        """Flatten to the 8 uint256 words passed to the verifier contract."""
        p_a, p_b, p_c = self.points()
        return [*p_a, *p_b[0], *p_b[1], *p_c]

    @classmethod
    def from_calldata(cls, words: list[int | str]) -> "ZKProof":
        """Inverse of ``to_calldata``."""
        if len(words) != 8:
            raise ValueError(f"Groth16 calldata has 8 words, got {len(words)}")
        w = [str(int(x, 0) if isinstance(x, str) else x) for x in words]
        return cls(
            pi_a=[w[0], w[1], "1"],
            pi_b=[[w[3], w[2]], [w[5], w[4]], ["1", "0"]],
            pi_c=[w[6], w[7], "1"],
        )


class WithdrawalSignals(BaseModel):
    """
    Public inputs of a wrap or withdraw proof.

    ``to_list`` fixes the wire order; verifying against any other order
    must fail.
    """

    root: int
    recipient: str
    nullifier_hash: int
    relayer: str
    fee: int = 0
    refund: int = 0

    @field_validator("root", "nullifier_hash", "fee", "refund", mode="before")
    @classmethod
    def must_be_field_element(cls, v: int | str, info) -> int:
        return as_field_element(v, info.field_name)

    @field_validator("recipient", "relayer")
    @classmethod
    def must_be_address(cls, v: str) -> str:
        return normalize_address(v)

    def to_list(self) -> list[int]:
        """``[root, recipient, nullifierHash, relayer, fee, refund]``."""
        return [
            self.root,
            address_to_int(self.recipient),
            self.nullifier_hash,
            address_to_int(self.relayer),
            self.fee,
            self.refund,
        ]

    def to_strings(self) -> list[str]:
        """Decimal strings, as snarkjs writes ``public.json``."""
        return [str(s) for s in self.to_list()]
