"""
Oblivious Arithmetic
====================

Backend-agnostic interface over encrypted unsigned 64-bit amounts.

Callers never learn a comparison result: ``ge``/``try_sub``/``try_sum``
return an encrypted boolean and ``select`` picks between two already
computed outcomes. The ledger is written only against this interface, so
a homomorphic backend can replace the plaintext one without touching it.

Version: 0.1.0
"""

import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass

from shieldpool.core.errors import AccessDenied, InvalidFieldElement
from shieldpool.core.field import UINT64_MAX

UINT64_MODULUS = UINT64_MAX + 1


@dataclass(frozen=True)
class OpaqueAmount:
    """Handle to an encrypted u64."""

    handle: str


@dataclass(frozen=True)
class OpaqueBool:
    """Handle to an encrypted boolean."""

    handle: str


class SecureArithmetic(ABC):
    """
    Oblivious operations on opaque amounts.

    Implements the Strategy pattern for different encryption backends.
    """

    @abstractmethod
    def encrypt(self, value: int) -> OpaqueAmount:
        """Trivially encrypt a public constant."""
        ...

    def zero(self) -> OpaqueAmount:
        return self.encrypt(0)

    @abstractmethod
    def add(self, a: OpaqueAmount, b: OpaqueAmount) -> OpaqueAmount:
        """a + b, wrapping modulo 2**64."""
        ...

    @abstractmethod
    def sub(self, a: OpaqueAmount, b: OpaqueAmount) -> OpaqueAmount:
        """a - b, wrapping modulo 2**64."""
        ...

    @abstractmethod
    def ge(self, a: OpaqueAmount, b: OpaqueAmount) -> OpaqueBool:
        """Encrypted a >= b."""
        ...

    @abstractmethod
    def select(self, cond: OpaqueBool, a: OpaqueAmount, b: OpaqueAmount) -> OpaqueAmount:
        """``a`` where ``cond`` holds, else ``b``."""
        ...

    @abstractmethod
    def try_sum(self, a: OpaqueAmount, b: OpaqueAmount) -> tuple[OpaqueBool, OpaqueAmount]:
        """(no overflow, a + b if no overflow else a)."""
        ...

    def try_sub(self, a: OpaqueAmount, b: OpaqueAmount) -> tuple[OpaqueBool, OpaqueAmount]:
        """(a >= b, a - b if a >= b else a)."""
        ok = self.ge(a, b)
        return ok, self.select(ok, self.sub(a, b), a)

    @abstractmethod
    def is_initialized(self, amount: OpaqueAmount) -> bool:
        """Whether the handle refers to a value known to this backend."""
        ...

    @abstractmethod
    def reveal(self, amount: OpaqueAmount) -> int:
        """
        Backend-level decryption.

        Reserved for decryption oracles; pool logic must not call it.
        """
        ...


class PlaintextArithmetic(SecureArithmetic):
    """
    Reference backend keeping cleartexts behind random handles.

    Used for tests and development. Conditions are stored as 0/1 and
    applied arithmetically, so no operation branches on a stored value.
    """

    def __init__(self) -> None:
        self._amounts: dict[str, int] = {}
        self._bools: dict[str, int] = {}

    @staticmethod
    def _new_handle() -> str:
        return "0x" + secrets.token_hex(32)

    def _store(self, value: int) -> OpaqueAmount:
        handle = self._new_handle()
        self._amounts[handle] = value % UINT64_MODULUS
        return OpaqueAmount(handle)

    def _store_bool(self, bit: int) -> OpaqueBool:
        handle = self._new_handle()
        self._bools[handle] = bit
        return OpaqueBool(handle)

    def _load(self, amount: OpaqueAmount) -> int:
        try:
            return self._amounts[amount.handle]
        except KeyError as e:
            raise AccessDenied(f"Unknown amount handle {amount.handle}") from e

    def _load_bool(self, cond: OpaqueBool) -> int:
        try:
            return self._bools[cond.handle]
        except KeyError as e:
            raise AccessDenied(f"Unknown boolean handle {cond.handle}") from e

    def encrypt(self, value: int) -> OpaqueAmount:
        if not 0 <= value <= UINT64_MAX:
            raise InvalidFieldElement("amount must fit in 64 bits")
        return self._store(value)

    def add(self, a: OpaqueAmount, b: OpaqueAmount) -> OpaqueAmount:
        return self._store(self._load(a) + self._load(b))

    def sub(self, a: OpaqueAmount, b: OpaqueAmount) -> OpaqueAmount:
        return self._store(self._load(a) - self._load(b))

    def ge(self, a: OpaqueAmount, b: OpaqueAmount) -> OpaqueBool:
        return self._store_bool(int(self._load(a) >= self._load(b)))

    def select(self, cond: OpaqueBool, a: OpaqueAmount, b: OpaqueAmount) -> OpaqueAmount:
        bit = self._load_bool(cond)
        return self._store(bit * self._load(a) + (1 - bit) * self._load(b))

    def try_sum(self, a: OpaqueAmount, b: OpaqueAmount) -> tuple[OpaqueBool, OpaqueAmount]:
        total = self._load(a) + self._load(b)
        ok = self._store_bool(int(total <= UINT64_MAX))
        return ok, self.select(ok, self._store(total), a)

    def is_initialized(self, amount: OpaqueAmount) -> bool:
        return amount.handle in self._amounts

    def reveal(self, amount: OpaqueAmount) -> int:
        return self._load(amount)

    def reveal_bool(self, cond: OpaqueBool) -> bool:
        return bool(self._load_bool(cond))
