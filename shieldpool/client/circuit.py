"""
Circuit Inputs
==============

Builds the snarkjs input for the wrapOrWithdraw circuit from a note and
its authentication path. All values are decimal strings; ``isLeft`` is
0/1.
"""

from typing import Any

from shieldpool.client.notes import Note
from shieldpool.client.tree import MerklePath
from shieldpool.core.field import address_to_int


def build_circuit_input(
    note: Note,
    path: MerklePath,
    root: int,
    recipient: str,
    relayer: str,
    fee: int = 0,
    refund: int = 0,
) -> dict[str, Any]:
    """
    Args:
        note: Note being claimed
        path: Authentication path of ``note.commitment``
        root: Root the path leads to; must still be known by the pool
        recipient: Address bound as the receiver
        relayer: Address bound as the relayer
        fee: Relayer fee bound into the proof
        refund: Refund bound into the proof
    """
    return {
        "root": str(root),
        "receiver": str(address_to_int(recipient)),
        "siblings": [str(s) for s in path.siblings],
        "isLeft": [int(b) for b in path.is_left],
        "nullifier": str(note.nullifier),
        "nullifierHash": str(note.nullifier_hash),
        "secretKey": str(note.secret),
        "commitment": str(note.commitment),
        "relayer": str(address_to_int(relayer)),
        "fee": str(fee),
        "refund": str(refund),
    }
