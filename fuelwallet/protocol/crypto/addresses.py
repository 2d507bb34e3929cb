# MIT License
# Copyright (c) 2025 Hashborn

"""
Address codec.

An address is 32 raw bytes. It has two textual forms that convert into each
other without loss:

- b256: "0x" + 64 lowercase hex characters (big-endian bytes)
- bech32: "fuel1..." bech32m (BIP-350) encoding of the same 32 bytes

Public-key derived addresses are sha256(uncompressed 64-byte public key).
"""

import os
from typing import Callable, List, Tuple, Union

import bech32 # type: ignore

from .hash import HEX_DIGITS, sha256
from ..config.params import ADDRESS_LENGTH, BECH32_PREFIX, PUBLIC_KEY_LENGTH
from ..types.common import InvalidEncoding, InvalidKey, InvalidLength, UnresolvableAddress

BECH32M_CONST = 0x2BC830A3


def _strip_hex_prefix(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value


def _bytes_from_hex(value: str) -> bytes:
    body = _strip_hex_prefix(value)
    if not body or any(c not in HEX_DIGITS for c in body):
        raise InvalidEncoding(f"Not a hex string: {value!r}")
    if len(body) != ADDRESS_LENGTH * 2:
        raise InvalidLength(f"Expected {ADDRESS_LENGTH} bytes, got {len(body) / 2:g}: {value!r}")
    return bytes.fromhex(body)


def bech32m_encode(hrp: str, data: List[int]) -> str:
    """Encodes 5-bit words under `hrp` with a bech32m checksum."""
    values = bech32.bech32_hrp_expand(hrp) + list(data)
    polymod = bech32.bech32_polymod(values + [0] * 6) ^ BECH32M_CONST
    checksum = [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]
    return hrp + "1" + "".join(bech32.CHARSET[d] for d in list(data) + checksum)


def bech32m_decode(value: str) -> Tuple[str, List[int]]:
    """Splits a bech32m string into its HRP and 5-bit data words.

    Raises InvalidEncoding on mixed case, bad characters, bad length or a
    checksum that is not bech32m.
    """
    if any(ord(c) < 33 or ord(c) > 126 for c in value) or (value.lower() != value and value.upper() != value):
        raise InvalidEncoding(f"Invalid bech32 address: {value!r}")
    text = value.lower()
    pos = text.rfind("1")
    if pos < 1 or pos + 7 > len(text) or len(text) > 90:
        raise InvalidEncoding(f"Invalid bech32 address: {value!r}")
    if any(c not in bech32.CHARSET for c in text[pos + 1:]):
        raise InvalidEncoding(f"Invalid bech32 address: {value!r}")
    hrp = text[:pos]
    data = [bech32.CHARSET.find(c) for c in text[pos + 1:]]
    if bech32.bech32_polymod(bech32.bech32_hrp_expand(hrp) + data) != BECH32M_CONST:
        raise InvalidEncoding(f"Invalid bech32 checksum: {value!r}")
    return hrp, data[:-6]


def _bytes_from_bech32(value: str, prefix: str = BECH32_PREFIX) -> bytes:
    hrp, data = bech32m_decode(value)
    if hrp != prefix:
        raise InvalidEncoding(f"Unexpected bech32 prefix '{hrp}', expected '{prefix}'")

    decoded = bech32.convertbits(data, 5, 8, False)
    if decoded is None:
        raise InvalidEncoding(f"Invalid bech32 padding: {value!r}")
    if len(decoded) != ADDRESS_LENGTH:
        raise InvalidEncoding(f"Bech32 payload is {len(decoded)} bytes, expected {ADDRESS_LENGTH}")
    return bytes(decoded)


def _normalize_public_key(public_key: Union[str, bytes]) -> bytes:
    if isinstance(public_key, str):
        body = _strip_hex_prefix(public_key)
        if any(c not in HEX_DIGITS for c in body) or len(body) % 2:
            raise InvalidKey("Public key is not a hex string")
        public_key = bytes.fromhex(body)
    pk = bytes(public_key)
    # Accept SEC1 uncompressed form (0x04 || x || y)
    if len(pk) == PUBLIC_KEY_LENGTH + 1 and pk[0] == 0x04:
        pk = pk[1:]
    if len(pk) != PUBLIC_KEY_LENGTH:
        raise InvalidKey(f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(pk)}")
    return pk


class Address:
    """Immutable 32-byte identifier of an account, predicate or contract."""

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes):
        if not isinstance(raw, (bytes, bytearray)):
            raise InvalidEncoding(f"Address bytes expected, got {type(raw).__name__}")
        if len(raw) != ADDRESS_LENGTH:
            raise InvalidLength(f"Address must be {ADDRESS_LENGTH} bytes, got {len(raw)}")
        object.__setattr__(self, "_raw", bytes(raw))

    def __setattr__(self, name, value):
        raise AttributeError("Address is immutable")

    def __reduce__(self):
        return (Address, (self._raw,))

    # --- Constructors ---

    @classmethod
    def from_raw_bytes(cls, raw: bytes) -> "Address":
        return cls(raw)

    @classmethod
    def from_hex_string(cls, value: str) -> "Address":
        return cls(_bytes_from_hex(value))

    @classmethod
    def from_checksummed_string(cls, value: str) -> "Address":
        return cls(_bytes_from_bech32(value))

    @classmethod
    def from_public_key(cls, public_key: Union[str, bytes]) -> "Address":
        """Derives the address controlled by a secp256k1 public key."""
        return cls(sha256(_normalize_public_key(public_key)))

    @classmethod
    def from_random(cls) -> "Address":
        return cls(os.urandom(ADDRESS_LENGTH))

    @classmethod
    def from_string(cls, value: str) -> "Address":
        """Parses a string that may be either b256 hex or bech32.

        Hex is always attempted first: a malformed hex string must never be
        read as a bech32 address.
        """
        if not isinstance(value, str):
            raise UnresolvableAddress(f"Address string expected, got {type(value).__name__}")
        for name, parse in _PARSE_ORDER:
            try:
                return cls(parse(value))
            except (InvalidEncoding, InvalidLength):
                continue
        raise UnresolvableAddress(f"Unknown address format: only 'B256' and 'Bech32' are supported ({value!r})")

    from_dynamic_input = from_string
    from_b256 = from_hex_string
    from_bech32 = from_checksummed_string

    # --- Projections ---

    def to_bytes(self) -> bytes:
        return self._raw

    def to_hex_string(self) -> str:
        return "0x" + self._raw.hex()

    def to_checksummed_string(self) -> str:
        words = bech32.convertbits(self._raw, 8, 5, True)
        return bech32m_encode(BECH32_PREFIX, words)

    to_b256 = to_hex_string
    to_address = to_checksummed_string

    def equals(self, other: "Address") -> bool:
        return isinstance(other, Address) and self._raw == other._raw

    def __eq__(self, other) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self._raw == other._raw

    def __lt__(self, other: "Address") -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self._raw < other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __bytes__(self) -> bytes:
        return self._raw

    def __str__(self) -> str:
        return self.to_checksummed_string()

    def __repr__(self) -> str:
        return f"Address({self.to_checksummed_string()})"


_PARSE_ORDER: Tuple[Tuple[str, Callable[[str], bytes]], ...] = (
    ("b256", _bytes_from_hex),
    ("bech32", _bytes_from_bech32),
)


def is_b256(value: str) -> bool:
    try:
        _bytes_from_hex(value)
        return True
    except (InvalidEncoding, InvalidLength):
        return False


def is_bech32(value: str) -> bool:
    try:
        _bytes_from_bech32(value)
        return True
    except (InvalidEncoding, InvalidLength):
        return False


def to_bech32(b256: str) -> str:
    return Address.from_hex_string(b256).to_checksummed_string()


def to_b256(bech32_address: str) -> str:
    return Address.from_checksummed_string(bech32_address).to_hex_string()


def addressify(value) -> Address:
    """Returns the Address behind an account-like object, an Address, or a string."""
    if isinstance(value, Address):
        return value
    if isinstance(value, str):
        return Address.from_string(value)
    address = getattr(value, "address", None)
    if isinstance(address, Address):
        return address
    raise UnresolvableAddress(f"Cannot resolve an address from {type(value).__name__}")
