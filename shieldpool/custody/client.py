"""
Asset Custody Interface
=======================

Abstract base class for moving the wrapped external asset in and out of
the pool's escrow.

Version: 0.1.0
"""

from abc import ABC, abstractmethod


class AssetCustody(ABC):
    """
    Escrow of the external asset backing pool notes.

    Implementations raise ``CustodyError`` on any failed transfer and
    leave balances untouched in that case.
    """

    @property
    @abstractmethod
    def escrow_account(self) -> str:
        """Account holding deposited funds."""
        ...

    @abstractmethod
    def transfer_in(self, sender: str, amount: int) -> None:
        """Pull ``amount`` from ``sender`` into escrow."""
        ...

    @abstractmethod
    def transfer_out(self, recipient: str, amount: int) -> None:
        """Release ``amount`` from escrow to ``recipient``."""
        ...

    @abstractmethod
    def balance_of(self, account: str) -> int:
        """Public balance of ``account``."""
        ...
