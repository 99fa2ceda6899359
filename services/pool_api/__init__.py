"""
Pool API Service
================

HTTP surface of the shielded pool.

This service provides:
- Deposit, withdraw, wrap, unwrap and unwrap finalization
- Queryable state: roots, nullifiers, pending unwraps, balances
- The ordered event log for indexers

Version: 0.1.0
"""

__version__ = "0.1.0"
