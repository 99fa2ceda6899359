"""
Client Helpers
==============

Note generation, the off-chain Merkle tree and withdraw-circuit inputs.

Usage:
    from shieldpool.client import MerkleTree, Note, build_circuit_input

    note = Note.generate()
    tree.insert(note.commitment)
    circuit_input = build_circuit_input(
        note, tree.path(0), tree.root, recipient, relayer
    )
"""

from shieldpool.client.circuit import build_circuit_input
from shieldpool.client.notes import Note, random_field_element
from shieldpool.client.tree import MerklePath, MerkleTree, compute_root

__all__ = [
    "Note",
    "random_field_element",
    "MerkleTree",
    "MerklePath",
    "compute_root",
    "build_circuit_input",
]
