"""
In-Memory Asset Custody
=======================

Mock token ledger for development and testing.

Version: 0.1.0
"""

from typing import Any

from shieldpool.core.errors import CustodyError
from shieldpool.core.field import normalize_address
from shieldpool.custody.client import AssetCustody
from shieldpool.logging import get_logger

logger = get_logger(__name__)


class InMemoryAssetCustody(AssetCustody):
    """
    In-memory mintable token with a pool escrow account.

    Data is stored in memory and lost on restart.
    """

    def __init__(self, escrow_account: str) -> None:
        self._escrow = normalize_address(escrow_account)
        self._balances: dict[str, int] = {}
        self._transfers = 0
        logger.debug("mock_custody_initialized", escrow=self._escrow)

    @property
    def escrow_account(self) -> str:
        return self._escrow

    def mint(self, account: str, amount: int) -> None:
        """Credit test funds."""
        if amount < 0:
            raise ValueError("amount must be non-negative")
        account = normalize_address(account)
        self._balances[account] = self._balances.get(account, 0) + amount

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise CustodyError("amount must be non-negative", amount=amount)
        if sender == recipient:
            raise CustodyError(f"self-transfer on {sender}", account=sender)
        available = self._balances.get(sender, 0)
        if available < amount:
            raise CustodyError(
                f"insufficient funds: {sender} holds {available}, needs {amount}",
                account=sender,
            )
        self._balances[sender] = available - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
        self._transfers += 1

    def transfer_in(self, sender: str, amount: int) -> None:
        self._move(normalize_address(sender), self._escrow, amount)
        logger.debug("mock_custody_transfer_in", sender=sender, amount=amount)

    def transfer_out(self, recipient: str, amount: int) -> None:
        self._move(self._escrow, normalize_address(recipient), amount)
        logger.debug("mock_custody_transfer_out", recipient=recipient, amount=amount)

    def health_check(self) -> dict[str, Any]:
        """Check mock custody health."""
        return {
            "status": "healthy",
            "mode": "mock",
            "escrow_balance": self.balance_of(self._escrow),
            "transfers": self._transfers,
        }
