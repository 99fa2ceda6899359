"""
Development Pool
================

Wires a complete pool from settings with the in-process collaborators:
in-memory custody, plaintext arithmetic, the plaintext decryption oracle
and the configured proof verifier.

Version: 0.1.0
"""

from dataclasses import dataclass

from shieldpool.config import Settings
from shieldpool.core.field import Hasher, hash_left_right
from shieldpool.custody import InMemoryAssetCustody
from shieldpool.engine import ShieldedPoolEngine
from shieldpool.ledger import ConfidentialLedger, PlaintextArithmetic, PlaintextDecryptionOracle
from shieldpool.zk.verifier import ProofVerifier, get_proof_verifier


@dataclass
class DevelopmentPool:
    """Engine plus handles on the collaborators it was built with."""

    engine: ShieldedPoolEngine
    custody: InMemoryAssetCustody
    oracle: PlaintextDecryptionOracle
    verifier: ProofVerifier


def build_development_pool(
    config: Settings,
    verifier: ProofVerifier | None = None,
    hasher: Hasher = hash_left_right,
) -> DevelopmentPool:
    """
    Build an engine backed by in-memory collaborators.

    Args:
        config: Application settings
        verifier: Overrides the verifier selected by ``config.verifier``
        hasher: Tree compression function
    """
    address = config.pool.address
    custody = InMemoryAssetCustody(escrow_account=address)
    ledger = ConfidentialLedger(
        PlaintextArithmetic(),
        owner=address,
        uninitialized_sender_as_zero=config.ledger.uninitialized_sender_as_zero,
    )
    oracle = PlaintextDecryptionOracle(
        ledger,
        signing_key=config.disclosure.signing_key.get_secret_value().encode(),
    )
    verifier = verifier or get_proof_verifier(config.verifier)

    engine = ShieldedPoolEngine.from_settings(
        config,
        verifier=verifier,
        custody=custody,
        ledger=ledger,
        disclosure_verifier=oracle,
        hasher=hasher,
    )
    return DevelopmentPool(engine=engine, custody=custody, oracle=oracle, verifier=verifier)
