"""
Pool Errors
===========

Error taxonomy for the shielded pool. Every error carries a stable
``code`` so that service layers can map it without string matching.

None of these are retried internally.
"""


class ShieldedPoolError(Exception):
    """Base class for all pool errors."""

    code = "pool_error"

    def __init__(self, message: str | None = None, **details: object) -> None:
        self.details = details
        super().__init__(message or self.__class__.__doc__ or self.code)


class InvalidFieldElement(ShieldedPoolError, ValueError):
    """Value is not a canonical field element or address."""

    code = "invalid_field_element"


class StructureFull(ShieldedPoolError):
    """Membership tree has no free leaf left."""

    code = "structure_full"


class AlreadyPresent(ShieldedPoolError):
    """Value already recorded in a write-once registry."""

    code = "already_present"


class DuplicateCommitment(AlreadyPresent):
    """Commitment has already been submitted."""

    code = "duplicate_commitment"


class AlreadySpent(AlreadyPresent):
    """Nullifier hash has already been spent."""

    code = "already_spent"


class UnknownRoot(ShieldedPoolError):
    """Root is not within the retained history window."""

    code = "unknown_root"


class InvalidProof(ShieldedPoolError):
    """Proof does not verify against the public signals."""

    code = "invalid_proof"


class NotFound(ShieldedPoolError):
    """No pending unwrap was ever issued under this index."""

    code = "not_found"


class AlreadyProcessed(ShieldedPoolError):
    """Pending unwrap has already been finalized."""

    code = "already_processed"


class InvalidDisclosureProof(ShieldedPoolError):
    """Decryption proof does not attest the submitted cleartext."""

    code = "invalid_disclosure_proof"


class ZeroBalance(ShieldedPoolError):
    """Account has no initialized confidential balance."""

    code = "zero_balance"


class AccessDenied(ShieldedPoolError):
    """Principal may not act on this account or handle."""

    code = "access_denied"


class CustodyError(ShieldedPoolError):
    """External asset transfer failed."""

    code = "custody_error"
