"""
Field Elements
==============

Fixed-width protocol values: commitments, nullifier hashes and roots are
unsigned integers below the BN254 scalar field order, addresses are 20-byte
hex strings. Also hosts the default two-input compression function used
by the membership tree.

The compression function must agree bit-for-bit with the one inside the
withdraw circuit. The default here is SHA-256 reduced into the field;
deployments that prove with Poseidon inject their own ``Hasher``.
"""

import hashlib
from collections.abc import Callable

from shieldpool.core.errors import InvalidFieldElement


# BN254 scalar field order
FIELD_SIZE = 21888242871839275222246405745257275088548364400416034343698204186575808495617

UINT64_MAX = 2**64 - 1

ADDRESS_BYTES = 20

Hasher = Callable[[int, int], int]


def as_field_element(value: int | str, name: str = "value") -> int:
    """
    Parse and range-check a field element.

    Accepts ints, decimal strings and ``0x`` hex strings. Values are not
    reduced: anything outside ``[0, FIELD_SIZE)`` is rejected.
    """
    if isinstance(value, bool):
        raise InvalidFieldElement(f"{name} must be an integer", field=name)
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = int(text, 16) if text.lower().startswith("0x") else int(text, 10)
        except ValueError as e:
            raise InvalidFieldElement(f"{name} is not a number: {value!r}", field=name) from e
    elif isinstance(value, int):
        parsed = value
    else:
        raise InvalidFieldElement(f"{name} must be an integer", field=name)

    if not 0 <= parsed < FIELD_SIZE:
        raise InvalidFieldElement(f"{name} is outside the scalar field", field=name)
    return parsed


def to_bytes32(value: int) -> bytes:
    """Big-endian 32-byte encoding."""
    return value.to_bytes(32, byteorder="big", signed=False)


def from_bytes32(data: bytes) -> int:
    """Decode a 32-byte big-endian word."""
    if len(data) != 32:
        raise InvalidFieldElement(f"expected 32 bytes, got {len(data)}")
    return int.from_bytes(data, byteorder="big", signed=False)


def to_hex32(value: int) -> str:
    """0x-prefixed, zero-padded 32-byte hex."""
    return "0x" + to_bytes32(value).hex()


def normalize_address(address: str) -> str:
    """Validate a 20-byte hex address and return it lower-cased."""
    if not isinstance(address, str) or not address.lower().startswith("0x"):
        raise InvalidFieldElement(f"address must be 0x-prefixed hex: {address!r}")
    body = address[2:]
    if len(body) != ADDRESS_BYTES * 2:
        raise InvalidFieldElement(f"address must be {ADDRESS_BYTES} bytes: {address!r}")
    try:
        int(body, 16)
    except ValueError as e:
        raise InvalidFieldElement(f"address is not hex: {address!r}") from e
    return "0x" + body.lower()


def address_to_int(address: str) -> int:
    """Integer form of an address, as bound into public signals."""
    return int(normalize_address(address), 16)


def sha256_field_hash(*values: int) -> int:
    """SHA-256 over 32-byte words, reduced into the field."""
    h = hashlib.sha256()
    for v in values:
        h.update(to_bytes32(v))
    return int.from_bytes(h.digest(), byteorder="big") % FIELD_SIZE


def hash_left_right(left: int, right: int) -> int:
    """Default two-to-one compression for tree nodes."""
    if not 0 <= left < FIELD_SIZE:
        raise InvalidFieldElement("left input must be within the field")
    if not 0 <= right < FIELD_SIZE:
        raise InvalidFieldElement("right input must be within the field")
    return sha256_field_hash(left, right)
