"""
ZK-SNARK Integration Module
===========================

Groth16 proof models and verifiers for wrap/withdraw.

Usage:
    from shieldpool.zk import WithdrawalSignals, ZKProof, get_proof_verifier

    verifier = get_proof_verifier(settings.verifier)
    p_a, p_b, p_c = proof.points()
    ok = verifier.verify(p_a, p_b, p_c, signals.to_list())

Version: 0.1.0
"""

from shieldpool.zk.models import (
    SIGNAL_ORDER,
    WithdrawalSignals,
    ZKProof,
)
from shieldpool.zk.verifier import (
    ProofVerifier,
    SnarkjsProofVerifier,
    StaticProofVerifier,
    get_proof_verifier,
)


__all__ = [
    # Verifier
    "ProofVerifier",
    "SnarkjsProofVerifier",
    "StaticProofVerifier",
    "get_proof_verifier",
    # Models
    "ZKProof",
    "WithdrawalSignals",
    "SIGNAL_ORDER",
]
