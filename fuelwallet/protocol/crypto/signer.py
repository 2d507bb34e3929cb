# MIT License
# Copyright (c) 2025 Hashborn

"""
Message hashing, signing and signer recovery.

Signatures are 64 bytes: r (32 bytes) || s (32 bytes), with s in the lower
half of the curve order and the recovery id stored in the top bit of s.
Nonces are derived per RFC 6979, so a (key, digest) pair always yields the
same signature.

Recovery is not authentication. A well-formed signature made by another key
recovers a different address without raising; callers compare the recovered
address with the one they expect (see verify_message).
"""

import hashlib
import logging
from typing import List, Union

from ecdsa import VerifyingKey, SECP256k1 # type: ignore
from ecdsa.util import sigdecode_string # type: ignore

from .addresses import Address
from .hash import arrayify, sha256
from .keys import SecretKey, CURVE_ORDER
from ..config.params import MESSAGE_PREFIX, SIGNATURE_LENGTH
from ..types.common import InvalidSignature
from ...observability import metrics

logger = logging.getLogger(__name__)

DIGEST_LENGTH = 32
HALF_ORDER = CURVE_ORDER // 2


def hash_message(message: Union[str, bytes]) -> bytes:
    """Hashes a personal message under the message domain tag.

    digest = sha256(PREFIX || ascii(len(message)) || message)
    """
    payload = message.encode("utf-8") if isinstance(message, str) else bytes(message)
    return sha256(MESSAGE_PREFIX + str(len(payload)).encode("ascii") + payload)


def _check_digest(digest: bytes) -> bytes:
    digest = bytes(digest)
    if len(digest) != DIGEST_LENGTH:
        raise ValueError(f"Digest must be {DIGEST_LENGTH} bytes, got {len(digest)}")
    return digest


def _candidates(digest: bytes, r: int, s: int) -> List[VerifyingKey]:
    rs = r.to_bytes(32, "big") + s.to_bytes(32, "big")
    return VerifyingKey.from_public_key_recovery_with_digest(
        rs, digest, SECP256k1, hashfunc=hashlib.sha256, sigdecode=sigdecode_string
    )


def sign(message_hash: bytes, priv: Union[str, bytes, SecretKey]) -> bytes:
    """Signs a 32-byte digest. Returns the 64-byte compact signature."""
    digest = _check_digest(message_hash)
    secret = priv if isinstance(priv, SecretKey) else SecretKey(priv)
    sk = secret.signing_key()

    r, s = sk.sign_digest_deterministic(
        digest, hashfunc=hashlib.sha256, sigencode=lambda r, s, order: (r, s)
    )
    if s > HALF_ORDER:
        s = CURVE_ORDER - s

    public_key = sk.get_verifying_key().to_string()
    recovery_id = None
    for i, vk in enumerate(_candidates(digest, r, s)):
        if vk.to_string() == public_key:
            recovery_id = i
            break
    if recovery_id is None:
        # Only possible if ecdsa returned an inconsistent signature
        raise RuntimeError("Unable to determine recovery id for signature")

    s_bytes = bytearray(s.to_bytes(32, "big"))
    s_bytes[0] |= recovery_id << 7

    metrics.signatures_total.inc()
    return r.to_bytes(32, "big") + bytes(s_bytes)


def recover_public_key(message_hash: bytes, signature: Union[str, bytes]) -> bytes:
    """Recovers the 64-byte public key that produced `signature` over `message_hash`."""
    digest = _check_digest(message_hash)
    if isinstance(signature, str):
        try:
            signature = arrayify(signature)
        except ValueError as e:
            metrics.recoveries_total.labels(result="invalid").inc()
            raise InvalidSignature("Signature is not a valid hex string") from e
    sig = bytes(signature)
    if len(sig) != SIGNATURE_LENGTH:
        metrics.recoveries_total.labels(result="invalid").inc()
        raise InvalidSignature(f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(sig)}")

    r = int.from_bytes(sig[:32], "big")
    recovery_id = sig[32] >> 7
    s = int.from_bytes(bytes([sig[32] & 0x7F]) + sig[33:], "big")
    if not (0 < r < CURVE_ORDER and 0 < s < CURVE_ORDER):
        metrics.recoveries_total.labels(result="invalid").inc()
        raise InvalidSignature("Signature scalars are out of range")

    try:
        candidates = _candidates(digest, r, s)
    except Exception as e:
        metrics.recoveries_total.labels(result="invalid").inc()
        raise InvalidSignature(f"Signature does not describe a curve point: {e}") from e

    metrics.recoveries_total.labels(result="ok").inc()
    return candidates[recovery_id].to_string()


def recover_address(message_hash: bytes, signature: Union[str, bytes]) -> Address:
    return Address.from_public_key(recover_public_key(message_hash, signature))


def verify_message(address: Address, message: Union[str, bytes], signature: Union[str, bytes]) -> bool:
    """True when `signature` over `message` was made by the key behind `address`."""
    try:
        recovered = recover_address(hash_message(message), signature)
    except InvalidSignature:
        logger.debug(f"Rejecting malformed signature for {address}")
        return False
    return recovered == address


class Signer:
    """Holds one private key and signs digests with it."""

    def __init__(self, private_key: Union[str, bytes, SecretKey]):
        self._secret = private_key if isinstance(private_key, SecretKey) else SecretKey(private_key)
        vk = self._secret.signing_key().get_verifying_key()
        self.public_key = "0x" + vk.to_string().hex()
        self.compressed_public_key = "0x" + vk.to_string("compressed").hex()
        self.address = Address.from_public_key(vk.to_string())

    @property
    def private_key(self) -> str:
        return self._secret.hex()

    @property
    def secret(self) -> SecretKey:
        return self._secret

    def sign(self, digest: bytes) -> bytes:
        return sign(digest, self._secret)

    def wipe(self) -> None:
        self._secret.wipe()

    recover_public_key = staticmethod(recover_public_key)
    recover_address = staticmethod(recover_address)

    def __repr__(self) -> str:
        return f"Signer({self.address})"
