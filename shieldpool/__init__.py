"""
SHIELDPOOL Library
==================

Shielded-pool ledger: commitment deposits, proof-gated wrap/withdraw,
confidential balances and disclosure-gated unwrap.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - auth: Account bearer tokens
    - core: Field elements, errors, membership history, registries
    - ledger: Oblivious arithmetic, confidential ledger, disclosure oracle
    - zk: Groth16 proof models and verifiers
    - custody: External asset custody (in-memory / pluggable)
    - models: Observable events and operation receipts
    - client: Notes, off-chain Merkle tree and circuit inputs
    - engine: ShieldedPoolEngine

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Shieldpool Team"

from shieldpool.config import settings
from shieldpool.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
