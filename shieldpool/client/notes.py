"""
Notes
=====

Client-side note material: ``commitment = H(secret, nullifier)`` goes into
the pool on deposit, ``nullifier_hash = H1(nullifier)`` is revealed on
wrap or withdraw.
"""

import secrets
from collections.abc import Callable
from dataclasses import dataclass, field

from shieldpool.core.field import FIELD_SIZE, Hasher, hash_left_right, sha256_field_hash, to_hex32

# 31 bytes always lands below the field order
NOTE_SECRET_BYTES = 31


def random_field_element() -> int:
    """Uniform 248-bit value, below FIELD_SIZE."""
    return int.from_bytes(secrets.token_bytes(NOTE_SECRET_BYTES), "big")


@dataclass(frozen=True)
class Note:
    """Secret pair backing one pool deposit."""

    secret: int
    nullifier: int
    hasher: Hasher = field(default=hash_left_right, compare=False, repr=False)
    single_hasher: Callable[[int], int] = field(
        default=sha256_field_hash, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        for name in ("secret", "nullifier"):
            if not 0 <= getattr(self, name) < FIELD_SIZE:
                raise ValueError(f"{name} must be a field element")

    @classmethod
    def generate(
        cls,
        hasher: Hasher = hash_left_right,
        single_hasher: Callable[[int], int] = sha256_field_hash,
    ) -> "Note":
        return cls(
            secret=random_field_element(),
            nullifier=random_field_element(),
            hasher=hasher,
            single_hasher=single_hasher,
        )

    @property
    def commitment(self) -> int:
        return self.hasher(self.secret, self.nullifier)

    @property
    def nullifier_hash(self) -> int:
        return self.single_hasher(self.nullifier)

    def public_view(self) -> dict[str, str]:
        """Values safe to share: commitment and nullifier hash."""
        return {
            "commitment": to_hex32(self.commitment),
            "nullifier_hash": to_hex32(self.nullifier_hash),
        }
