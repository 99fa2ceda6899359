"""
Shielded Pool Engine
====================

Orchestrates the membership history, registries, confidential ledger,
proof verifier and asset custody into the pool operations:

    deposit          commitment in, external asset into escrow
    withdraw         proof of a note, external asset out
    wrap             proof of a note, confidential balance credited
    unwrap           confidential balance -> pending note (phase 1)
    finalize_unwrap  disclosed amount -> note inserted or refused (phase 2)

Every operation runs under one lock and evaluates all of its
preconditions before mutating anything, so callers observe a total order
of whole operations and a failed operation leaves no trace.

Version: 0.1.0
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from pydantic import ValidationError

from shieldpool.config import Settings
from shieldpool.core.errors import (
    AccessDenied,
    InvalidDisclosureProof,
    InvalidFieldElement,
    InvalidProof,
    ShieldedPoolError,
    StructureFull,
    UnknownRoot,
)
from shieldpool.core.field import Hasher, as_field_element, hash_left_right, normalize_address
from shieldpool.core.merkle import MembershipHistory
from shieldpool.core.pending import PendingDisclosureRegistry, PendingUnwrap
from shieldpool.core.registry import CommitmentRegistry, NullifierRegistry
from shieldpool.custody import AssetCustody
from shieldpool.ledger import (
    ConfidentialLedger,
    DisclosureVerifier,
    OpaqueAmount,
    decode_clear_amount,
)
from shieldpool.logging import get_logger, operation_context
from shieldpool.models.events import (
    BaseEvent,
    Deposited,
    EventLog,
    OperationReceipt,
    PendingUnwrapCreated,
    UnwrapFailed,
    UnwrapFinalized,
    Withdrawn,
    Wrapped,
)
from shieldpool.zk.models import WithdrawalSignals, ZKProof
from shieldpool.zk.verifier import ProofVerifier

logger = get_logger(__name__)


class ShieldedPoolEngine:
    """
    Single owner of all pool state.

    Usage:
        engine = ShieldedPoolEngine.from_settings(
            settings,
            verifier=verifier,
            custody=custody,
            ledger=ledger,
            disclosure_verifier=oracle,
        )
        receipt = engine.deposit(commitment, depositor=alice)
    """

    def __init__(
        self,
        *,
        verifier: ProofVerifier,
        custody: AssetCustody,
        ledger: ConfidentialLedger,
        disclosure_verifier: DisclosureVerifier,
        denomination: int,
        levels: int,
        root_history_size: int,
        zero_value: int,
        hasher: Hasher = hash_left_right,
    ) -> None:
        if normalize_address(custody.escrow_account) != ledger.owner:
            raise ValueError("custody escrow and ledger owner must be the pool address")

        self.address = ledger.owner
        self.denomination = denomination
        self.verifier = verifier
        self.custody = custody
        self.ledger = ledger
        self.disclosure_verifier = disclosure_verifier

        self.tree = MembershipHistory(
            levels=levels,
            root_history_size=root_history_size,
            zero_value=zero_value,
            hasher=hasher,
        )
        self.commitments = CommitmentRegistry()
        self.nullifiers = NullifierRegistry()
        self.pending = PendingDisclosureRegistry()
        self.event_log = EventLog()

        self._lock = threading.RLock()

        logger.info(
            "pool_initialized",
            pool=self.address,
            levels=levels,
            root_history_size=root_history_size,
            denomination=denomination,
        )

    @classmethod
    def from_settings(
        cls,
        config: Settings,
        *,
        verifier: ProofVerifier,
        custody: AssetCustody,
        ledger: ConfidentialLedger,
        disclosure_verifier: DisclosureVerifier,
        hasher: Hasher = hash_left_right,
    ) -> "ShieldedPoolEngine":
        """Build an engine with the protocol parameters from ``config.pool``."""
        return cls(
            verifier=verifier,
            custody=custody,
            ledger=ledger,
            disclosure_verifier=disclosure_verifier,
            denomination=config.pool.denomination,
            levels=config.pool.levels,
            root_history_size=config.pool.root_history_size,
            zero_value=config.pool.zero_value,
            hasher=hasher,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        with self._lock, operation_context(name, pool=self.address):
            try:
                yield
            except ShieldedPoolError as e:
                logger.warning("operation_rejected", code=e.code, error=str(e))
                raise

    def _receipt(
        self,
        operation: str,
        effects: list[BaseEvent],
        **fields: int | None,
    ) -> OperationReceipt:
        for event in effects:
            self.event_log.append(event)
        return OperationReceipt(operation=operation, effects=effects, **fields)

    def _require_free_leaf(self) -> None:
        if self.tree.is_full:
            raise StructureFull(
                "Merkle tree is full. No more leaves can be added",
                capacity=self.tree.capacity,
            )

    def _require_counterparty(self, account: str, role: str) -> None:
        """The pool's own escrow account cannot fund deposits or unwraps."""
        if account == self.address:
            raise AccessDenied(f"Pool account cannot act as {role}", account=account)

    def _check_claim(
        self,
        proof: ZKProof,
        root: int | str,
        recipient: str,
        nullifier_hash: int | str,
        relayer: str,
        fee: int | str,
        refund: int | str,
    ) -> WithdrawalSignals:
        """Preconditions shared by wrap and withdraw. Mutates nothing."""
        try:
            signals = WithdrawalSignals(
                root=root,
                recipient=recipient,
                nullifier_hash=nullifier_hash,
                relayer=relayer,
                fee=fee,
                refund=refund,
            )
        except ValidationError as e:
            raise InvalidFieldElement(str(e)) from e

        self.nullifiers.require_absent(signals.nullifier_hash)

        if not self.tree.is_known_root(signals.root):
            raise UnknownRoot("Cannot find your merkle root", root=hex(signals.root))

        try:
            p_a, p_b, p_c = proof.points()
        except (ValueError, IndexError) as e:
            raise InvalidProof("Malformed proof points") from e

        if not self.verifier.verify(p_a, p_b, p_c, signals.to_list()):
            raise InvalidProof("Invalid withdraw proof")

        return signals

    # =========================================================================
    # Operations
    # =========================================================================

    def deposit(self, commitment: int | str, depositor: str) -> OperationReceipt:
        """
        Accept a note commitment against one denomination of the asset.

        Raises:
            AccessDenied: ``depositor`` is the pool itself
            DuplicateCommitment: ``commitment`` was submitted before
            StructureFull: No free leaf
            CustodyError: The asset could not be pulled from ``depositor``
        """
        with self._operation("deposit"):
            commitment = as_field_element(commitment, "commitment")
            depositor = normalize_address(depositor)
            self._require_counterparty(depositor, "depositor")

            self.commitments.require_absent(commitment)
            self._require_free_leaf()
            self.custody.transfer_in(depositor, self.denomination)

            self.commitments.insert(commitment)
            leaf_index = self.tree.insert(commitment)

            logger.info("deposit_accepted", commitment=hex(commitment), leaf_index=leaf_index)
            return self._receipt(
                "deposit",
                [Deposited(commitment=commitment, leaf_index=leaf_index)],
                leaf_index=leaf_index,
                root=self.tree.root,
            )

    def withdraw(
        self,
        proof: ZKProof,
        root: int | str,
        recipient: str,
        nullifier_hash: int | str,
        relayer: str,
        fee: int | str = 0,
        refund: int | str = 0,
    ) -> OperationReceipt:
        """
        Release one denomination of the external asset to ``recipient``.

        Raises:
            AlreadySpent: Nullifier hash already consumed by wrap or withdraw
            UnknownRoot: ``root`` is outside the history window
            InvalidProof: Verifier rejected the proof
            CustodyError: Escrow could not release the asset
        """
        with self._operation("withdraw"):
            signals = self._check_claim(proof, root, recipient, nullifier_hash, relayer, fee, refund)

            self.custody.transfer_out(signals.recipient, self.denomination)
            self.nullifiers.insert(signals.nullifier_hash)

            logger.info(
                "withdraw_accepted",
                recipient=signals.recipient,
                nullifier_hash=hex(signals.nullifier_hash),
            )
            return self._receipt(
                "withdraw",
                [
                    Withdrawn(
                        recipient=signals.recipient,
                        nullifier_hash=signals.nullifier_hash,
                        relayer=signals.relayer,
                        fee=signals.fee,
                    )
                ],
            )

    def wrap(
        self,
        proof: ZKProof,
        root: int | str,
        recipient: str,
        nullifier_hash: int | str,
        relayer: str,
        fee: int | str = 0,
        refund: int | str = 0,
    ) -> OperationReceipt:
        """
        Credit one denomination to ``recipient``'s confidential balance.

        Same preconditions and errors as ``withdraw``; the asset stays in
        escrow.
        """
        with self._operation("wrap"):
            signals = self._check_claim(proof, root, recipient, nullifier_hash, relayer, fee, refund)

            self.ledger.mint(signals.recipient, self.ledger.arithmetic.encrypt(self.denomination))
            self.nullifiers.insert(signals.nullifier_hash)

            logger.info(
                "wrap_accepted",
                recipient=signals.recipient,
                nullifier_hash=hex(signals.nullifier_hash),
            )
            return self._receipt(
                "wrap",
                [
                    Wrapped(
                        recipient=signals.recipient,
                        nullifier_hash=signals.nullifier_hash,
                        relayer=signals.relayer,
                        fee=signals.fee,
                    )
                ],
            )

    def unwrap(self, owner: str, new_commitment: int | str) -> OperationReceipt:
        """
        Begin converting one denomination of ``owner``'s balance into a note.

        The debit is oblivious: with an insufficient balance the opaque
        zero moves and the call still succeeds. The moved amount is marked
        for public disclosure and settled by ``finalize_unwrap``.

        Raises:
            AccessDenied: ``owner`` is the pool itself
            DuplicateCommitment: ``new_commitment`` was submitted before
            StructureFull: No free leaf
            ZeroBalance: ``owner`` never held a confidential balance
        """
        with self._operation("unwrap"):
            owner = normalize_address(owner)
            self._require_counterparty(owner, "unwrap owner")
            commitment = as_field_element(new_commitment, "new_commitment")

            self.commitments.require_absent(commitment)
            self._require_free_leaf()

            requested = self.ledger.arithmetic.encrypt(self.denomination)
            actual = self.ledger.oblivious_transfer(owner, self.address, requested)

            self.commitments.insert(commitment)
            record = self.pending.create(owner, commitment, actual)
            self.ledger.request_disclosure(actual)

            logger.info("unwrap_pending", owner=owner, index=record.index)
            return self._receipt(
                "unwrap",
                [
                    PendingUnwrapCreated(
                        owner=owner,
                        commitment=commitment,
                        amount_handle=actual.handle,
                        index=record.index,
                    )
                ],
                unwrap_index=record.index,
            )

    def finalize_unwrap(
        self,
        index: int,
        clear_amount: bytes,
        disclosure_proof: bytes,
    ) -> OperationReceipt:
        """
        Settle a pending unwrap from its disclosed amount.

        Non-zero: the note commitment is inserted and the escrowed
        confidential amount burnt. Zero: the unwrap failed for lack of
        balance and nothing else changes. Either way the record is gone.

        Raises:
            NotFound: ``index`` was never issued
            AlreadyProcessed: ``index`` was finalized before
            InvalidDisclosureProof: Proof does not attest ``clear_amount``
            StructureFull: No free leaf for a successful unwrap
        """
        with self._operation("finalize_unwrap"):
            record = self.pending.require_live(index)
            amount: OpaqueAmount = record.amount

            if not self.disclosure_verifier.verify(amount, clear_amount, disclosure_proof):
                raise InvalidDisclosureProof(
                    f"Decryption proof rejected for unwrap {index}",
                    index=index,
                )
            clear = decode_clear_amount(clear_amount)

            if clear != 0:
                self._require_free_leaf()
                self.ledger.burn(self.address, amount)
                leaf_index = self.tree.insert(record.commitment)
                self.pending.complete(index)

                logger.info("unwrap_finalized", index=index, leaf_index=leaf_index)
                return self._receipt(
                    "finalize_unwrap",
                    [
                        UnwrapFinalized(
                            index=index,
                            owner=record.owner,
                            commitment=record.commitment,
                            leaf_index=leaf_index,
                        )
                    ],
                    leaf_index=leaf_index,
                    unwrap_index=index,
                    root=self.tree.root,
                )

            self.pending.complete(index)
            logger.info("unwrap_failed", index=index, owner=record.owner)
            return self._receipt(
                "finalize_unwrap",
                [UnwrapFailed(index=index, owner=record.owner, commitment=record.commitment)],
                unwrap_index=index,
            )

    # =========================================================================
    # Queries
    # =========================================================================

    def is_spent(self, nullifier_hash: int) -> bool:
        with self._lock:
            return self.nullifiers.is_spent(nullifier_hash)

    def is_known_root(self, root: int) -> bool:
        with self._lock:
            return self.tree.is_known_root(root)

    def get_pending_unwrap(self, index: int) -> PendingUnwrap:
        """Live record, or the empty record once finalized or if never issued."""
        with self._lock:
            return self.pending.get(index)

    @property
    def current_root(self) -> int:
        with self._lock:
            return self.tree.root

    @property
    def next_leaf_index(self) -> int:
        with self._lock:
            return self.tree.next_index

    def confidential_balance_of(self, account: str) -> OpaqueAmount | None:
        with self._lock:
            return self.ledger.balance_of(account)

    def events(self, since: int = 0, limit: int | None = None) -> list[BaseEvent]:
        with self._lock:
            return self.event_log.since(since, limit)

    def get_stats(self) -> dict[str, int]:
        """Counters for health and monitoring."""
        with self._lock:
            return {
                "next_leaf_index": self.tree.next_index,
                "capacity": self.tree.capacity,
                "commitments": len(self.commitments),
                "spent_nullifiers": len(self.nullifiers),
                "pending_unwraps": len(self.pending),
                "events": len(self.event_log),
            }
