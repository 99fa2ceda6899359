"""
Confidential Ledger
===================

Balance bookkeeping over opaque amounts.

All balance changes go through ``_update``, which debits with ``try_sub``
(or credits supply with ``try_sum``) and moves ``select(ok, amount, 0)``.
An insufficient balance therefore moves the opaque zero instead of
failing; only a later disclosure reveals which outcome happened.

Each new balance handle is readable by its holder and the ledger owner.

Version: 0.1.0
"""

from shieldpool.core.errors import AccessDenied, ZeroBalance
from shieldpool.core.field import normalize_address
from shieldpool.ledger.arithmetic import OpaqueAmount, SecureArithmetic
from shieldpool.logging import get_logger

logger = get_logger(__name__)


class ConfidentialLedger:
    """
    Opaque balances with capability-gated decryption.

    Usage:
        ledger = ConfidentialLedger(PlaintextArithmetic(), owner=pool_address)
        ledger.mint(alice, ledger.arithmetic.encrypt(10))
        moved = ledger.oblivious_transfer(alice, bob, amount)
    """

    def __init__(
        self,
        arithmetic: SecureArithmetic,
        owner: str,
        uninitialized_sender_as_zero: bool = False,
    ) -> None:
        """
        Args:
            arithmetic: Oblivious arithmetic backend
            owner: Principal granted decrypt capability over every balance
            uninitialized_sender_as_zero: Transfers from accounts without a
                balance move zero instead of raising ZeroBalance
        """
        self.arithmetic = arithmetic
        self.owner = normalize_address(owner)
        self.uninitialized_sender_as_zero = uninitialized_sender_as_zero

        self._balances: dict[str, OpaqueAmount] = {}
        self._acl: dict[str, set[str]] = {}
        self._public: set[str] = set()
        self._total_supply = arithmetic.zero()
        self._allow(self._total_supply, self.owner)

    # =========================================================================
    # Views
    # =========================================================================

    @property
    def total_supply(self) -> OpaqueAmount:
        return self._total_supply

    def balance_of(self, account: str) -> OpaqueAmount | None:
        """Current balance handle, or None if never credited."""
        return self._balances.get(normalize_address(account))

    def holders(self) -> list[str]:
        return list(self._balances)

    # =========================================================================
    # Access control
    # =========================================================================

    def _allow(self, amount: OpaqueAmount, *principals: str) -> None:
        self._acl.setdefault(amount.handle, set()).update(principals)

    def allow(self, amount: OpaqueAmount, principal: str) -> None:
        """Grant ``principal`` decrypt capability over ``amount``."""
        self._allow(amount, normalize_address(principal))

    def is_allowed(self, amount: OpaqueAmount, principal: str) -> bool:
        return normalize_address(principal) in self._acl.get(amount.handle, set())

    def request_disclosure(self, amount: OpaqueAmount) -> None:
        """Make ``amount`` publicly decryptable. Irreversible."""
        self._public.add(amount.handle)
        logger.debug("disclosure_requested", handle=amount.handle)

    def is_publicly_decryptable(self, amount: OpaqueAmount) -> bool:
        return amount.handle in self._public

    def decrypt(self, amount: OpaqueAmount, requester: str) -> int:
        """
        Decrypt under capability.

        Raises:
            AccessDenied: ``requester`` holds no capability and the handle
                is not publicly disclosed
        """
        if not (self.is_publicly_decryptable(amount) or self.is_allowed(amount, requester)):
            raise AccessDenied(
                f"{requester} may not decrypt {amount.handle}",
                handle=amount.handle,
            )
        return self.arithmetic.reveal(amount)

    # =========================================================================
    # Balance changes
    # =========================================================================

    def mint(self, to: str, amount: OpaqueAmount) -> OpaqueAmount:
        """Credit ``to`` and total supply. Returns the amount actually minted."""
        return self._update(None, normalize_address(to), amount)

    def burn(self, from_: str, amount: OpaqueAmount) -> OpaqueAmount:
        """
        Debit ``from_`` and total supply. Returns the amount actually burnt.

        Raises:
            ZeroBalance: ``from_`` has no balance handle
        """
        return self._update(normalize_address(from_), None, amount, strict=True)

    def oblivious_transfer(self, from_: str, to: str, amount: OpaqueAmount) -> OpaqueAmount:
        """
        Move ``amount`` or, if the sender cannot cover it, the opaque zero.

        Returns:
            The opaque amount that actually moved
        """
        return self._update(normalize_address(from_), normalize_address(to), amount)

    def _update(
        self,
        from_: str | None,
        to: str | None,
        amount: OpaqueAmount,
        strict: bool = False,
    ) -> OpaqueAmount:
        ar = self.arithmetic

        if from_ is None:
            ok, self._total_supply = ar.try_sum(self._total_supply, amount)
            self._allow(self._total_supply, self.owner)
        else:
            balance = self._balances.get(from_)
            if balance is None or not ar.is_initialized(balance):
                if strict or not self.uninitialized_sender_as_zero:
                    raise ZeroBalance(f"{from_} has no confidential balance", account=from_)
                balance = ar.zero()
            ok, new_balance = ar.try_sub(balance, amount)
            self._set_balance(from_, new_balance)

        transferred = ar.select(ok, amount, ar.zero())

        if to is None:
            self._total_supply = ar.sub(self._total_supply, transferred)
            self._allow(self._total_supply, self.owner)
        else:
            current = self._balances.get(to) or ar.zero()
            self._set_balance(to, ar.add(current, transferred))

        self._allow(transferred, self.owner, *(p for p in (from_, to) if p is not None))
        logger.debug(
            "ledger_updated",
            sender=from_,
            recipient=to,
            transferred=transferred.handle,
        )
        return transferred

    def _set_balance(self, account: str, balance: OpaqueAmount) -> None:
        self._balances[account] = balance
        self._allow(balance, account, self.owner)
