"""
Pool Core
=========

Field elements, error taxonomy, the membership history tree and the
write-once registries the pool state machine is built from.
"""

from shieldpool.core.errors import (
    AccessDenied,
    AlreadyPresent,
    AlreadyProcessed,
    AlreadySpent,
    CustodyError,
    DuplicateCommitment,
    InvalidDisclosureProof,
    InvalidFieldElement,
    InvalidProof,
    NotFound,
    ShieldedPoolError,
    StructureFull,
    UnknownRoot,
    ZeroBalance,
)
from shieldpool.core.field import (
    FIELD_SIZE,
    Hasher,
    address_to_int,
    as_field_element,
    hash_left_right,
    normalize_address,
)
from shieldpool.core.merkle import MembershipHistory
from shieldpool.core.pending import PendingDisclosureRegistry, PendingUnwrap
from shieldpool.core.registry import CommitmentRegistry, NullifierRegistry


__all__ = [
    # Errors
    "ShieldedPoolError",
    "InvalidFieldElement",
    "StructureFull",
    "AlreadyPresent",
    "DuplicateCommitment",
    "AlreadySpent",
    "UnknownRoot",
    "InvalidProof",
    "NotFound",
    "AlreadyProcessed",
    "InvalidDisclosureProof",
    "ZeroBalance",
    "AccessDenied",
    "CustodyError",
    # Field
    "FIELD_SIZE",
    "Hasher",
    "as_field_element",
    "address_to_int",
    "normalize_address",
    "hash_left_right",
    # State
    "MembershipHistory",
    "CommitmentRegistry",
    "NullifierRegistry",
    "PendingDisclosureRegistry",
    "PendingUnwrap",
]
