# MIT License
# Copyright (c) 2025 Hashborn

import os
from typing import Optional, Union

from ecdsa import SigningKey, SECP256k1 # type: ignore

from .hash import arrayify, sha256
from ..types.common import InvalidKey

PRIVATE_KEY_LENGTH = 32
CURVE_ORDER = SECP256k1.order


class SecretKey:
    """
    Scoped holder for a secp256k1 private scalar.

    The scalar lives in a mutable buffer so it can be overwritten in place.
    wipe() runs on lock, on context-manager exit (including exceptions) and
    when the object is collected. A wiped key refuses to be used.
    """

    __slots__ = ("_buf",)

    def __init__(self, value: Union[str, bytes, bytearray]):
        raw = _parse_private_key(value)
        self._buf: Optional[bytearray] = bytearray(raw)

    @classmethod
    def generate(cls, entropy: Optional[bytes] = None) -> "SecretKey":
        """Creates a key from os.urandom, or from caller entropy when given."""
        if entropy is not None:
            candidate = sha256(bytes(entropy) + os.urandom(PRIVATE_KEY_LENGTH))
        else:
            candidate = os.urandom(PRIVATE_KEY_LENGTH)
        while not 0 < int.from_bytes(candidate, "big") < CURVE_ORDER:
            candidate = os.urandom(PRIVATE_KEY_LENGTH)
        return cls(candidate)

    @property
    def wiped(self) -> bool:
        return self._buf is None

    def _require(self) -> bytearray:
        if self._buf is None:
            raise InvalidKey("Private key material has been wiped")
        return self._buf

    def to_bytes(self) -> bytes:
        return bytes(self._require())

    def hex(self) -> str:
        return "0x" + self._require().hex()

    def signing_key(self) -> SigningKey:
        return SigningKey.from_string(bytes(self._require()), curve=SECP256k1)

    def wipe(self) -> None:
        buf = getattr(self, "_buf", None)
        if buf is not None:
            for i in range(len(buf)):
                buf[i] = 0
            self._buf = None

    def __enter__(self) -> "SecretKey":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def __del__(self):
        self.wipe()

    def __repr__(self) -> str:
        return "SecretKey(<wiped>)" if self.wiped else "SecretKey(<hidden>)"


def _parse_private_key(value: Union[str, bytes, bytearray]) -> bytes:
    if isinstance(value, str):
        try:
            raw = arrayify(value)
        except ValueError as e:
            raise InvalidKey("Private key is not a valid hex string") from e
    elif isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        raise InvalidKey(f"Unsupported private key type: {type(value).__name__}")

    if len(raw) != PRIVATE_KEY_LENGTH:
        raise InvalidKey(f"Private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(raw)}")
    if not 0 < int.from_bytes(raw, "big") < CURVE_ORDER:
        raise InvalidKey("Private key scalar is out of range for secp256k1")
    return raw


def generate_private_key() -> bytes:
    """Generates a random 32-byte private key."""
    with SecretKey.generate() as secret:
        return secret.to_bytes()


def public_key_from_private(priv: Union[str, bytes, SecretKey]) -> bytes:
    """Returns the uncompressed 64-byte public key (x || y) for a private key."""
    secret = priv if isinstance(priv, SecretKey) else SecretKey(priv)
    return secret.signing_key().get_verifying_key().to_string()
