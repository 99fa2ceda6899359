"""
Custody Module
==============

Transfers of the external asset wrapped by the pool.

Usage:
    from shieldpool.custody import InMemoryAssetCustody

    custody = InMemoryAssetCustody(escrow_account=pool_address)
    custody.mint(alice, 10**18)
    custody.transfer_in(alice, 10**18)
"""

from shieldpool.custody.client import AssetCustody
from shieldpool.custody.mock import InMemoryAssetCustody

__all__ = [
    "AssetCustody",
    "InMemoryAssetCustody",
]
