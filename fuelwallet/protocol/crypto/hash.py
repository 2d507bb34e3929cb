# MIT License
# Copyright (c) 2025 Hashborn

import hashlib
from typing import List, Union

def sha256(data: bytes) -> bytes:
    """Returns SHA256 hash of bytes."""
    return hashlib.sha256(data).digest()

def hexlify(data: bytes) -> str:
    return "0x" + bytes(data).hex()

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

def is_hex(text: str) -> bool:
    """True when every character of `text` is a hex digit (no whitespace, no prefix)."""
    return all(c in HEX_DIGITS for c in text)

def arrayify(value: Union[str, bytes, bytearray]) -> bytes:
    """Converts a hex string (with or without 0x) or bytes-like value to bytes."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    text = value[2:] if value[:2].lower() == "0x" else value
    if not is_hex(text):
        raise ValueError(f"Not a hex string: {value!r}")
    if len(text) % 2:
        raise ValueError(f"Hex string has odd length: {value!r}")
    return bytes.fromhex(text)

# Binary merkle tree (leaf/node domain separated)
LEAF_PREFIX = b"\x00"
NODE_PREFIX = b"\x01"
EMPTY_ROOT = sha256(b"")

def hash_leaf(data: bytes) -> bytes:
    return sha256(LEAF_PREFIX + data)

def hash_node(left: bytes, right: bytes) -> bytes:
    return sha256(NODE_PREFIX + left + right)

def merkle_root(leaves: List[bytes]) -> bytes:
    """Calculates the binary Merkle root of raw leaf data.

    An unpaired node at the end of a level is promoted unchanged.
    """
    if not leaves:
        return EMPTY_ROOT

    level = [hash_leaf(leaf) for leaf in leaves]
    while len(level) > 1:
        new_level = []
        for i in range(0, len(level) - 1, 2):
            new_level.append(hash_node(level[i], level[i + 1]))
        if len(level) % 2:
            new_level.append(level[-1])
        level = new_level

    return level[0]
