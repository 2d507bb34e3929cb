# MIT License
# Copyright (c) 2025 Hashborn

"""
Predicate accounts.

A predicate's address is the root of its bytecode, not a public key. Coins
sent there can be spent by any transaction carrying the bytecode and input
data that make the predicate evaluate to true. Evaluation happens on the
ledger after broadcast, never here.

Address derivation:
    chunks = bytecode split into 16 KiB pieces, last piece zero padded to 8 bytes
    address = sha256(b"FUEL" || merkle_root(chunks))
"""

import logging
from typing import Any, Dict, List, Optional, Union

from ..protocol.config.params import CONTRACT_ID_SEED, PREDICATE_CHUNK_SIZE, PREDICATE_WORD_SIZE
from ..protocol.crypto.addresses import Address
from ..protocol.crypto.hash import arrayify, merkle_root, sha256
from ..protocol.types.common import InvalidKey, InvalidPredicateData
from ..protocol.types.tx import PredicateData
from .account import Account
from .provider import CoinQuery

logger = logging.getLogger(__name__)


def chunk_and_pad(data: bytes, chunk_size: int = PREDICATE_CHUNK_SIZE) -> List[bytes]:
    chunks = [data[i:i + chunk_size] for i in range(0, len(data), chunk_size)]
    if chunks and len(chunks[-1]) % PREDICATE_WORD_SIZE:
        last = chunks[-1]
        chunks[-1] = last + b"\x00" * (PREDICATE_WORD_SIZE - len(last) % PREDICATE_WORD_SIZE)
    return chunks


def predicate_root(bytecode: bytes) -> bytes:
    return sha256(CONTRACT_ID_SEED + merkle_root(chunk_and_pad(bytes(bytecode))))


def apply_configurables(bytecode: bytes, configurables: Optional[Dict[int, bytes]]) -> bytes:
    """Writes pre-encoded configurable values into the bytecode at their offsets."""
    if not configurables:
        return bytes(bytecode)
    patched = bytearray(bytecode)
    for offset, value in sorted(configurables.items()):
        value = arrayify(value)
        if offset < 0 or offset + len(value) > len(patched):
            raise InvalidPredicateData(
                f"Configurable at offset {offset} ({len(value)} bytes) is outside the bytecode ({len(patched)} bytes)"
            )
        patched[offset:offset + len(value)] = value
    return bytes(patched)


def _main_inputs(abi: Dict[str, Any]) -> Optional[List[Any]]:
    for fn in abi.get("functions") or []:
        if fn.get("name") == "main":
            return fn.get("inputs") or []
    return None


class PredicateAccount(Account):
    kind = "predicate"

    def __init__(self,
                 bytecode: Union[str, bytes],
                 abi: Optional[Dict[str, Any]] = None,
                 input_data: Optional[List[Any]] = None,
                 configurables: Optional[Dict[int, bytes]] = None,
                 provider: Optional[CoinQuery] = None):
        code = apply_configurables(arrayify(bytecode), configurables)
        data = list(input_data) if input_data is not None else []

        if abi is not None:
            inputs = _main_inputs(abi)
            if inputs is None:
                raise InvalidPredicateData("Predicate ABI has no 'main' function")
            if input_data is not None and len(data) != len(inputs):
                raise InvalidPredicateData(
                    f"Predicate 'main' expects {len(inputs)} argument(s), got {len(data)}"
                )

        super().__init__(Address(predicate_root(code)), provider)
        self._bytecode = code
        self._abi = abi
        self._input_data = data
        logger.debug(f"Predicate {self.address} loaded ({len(code)} bytes)")

    @property
    def bytecode(self) -> bytes:
        return self._bytecode

    @property
    def abi(self) -> Optional[Dict[str, Any]]:
        return self._abi

    @property
    def input_data(self) -> List[Any]:
        return list(self._input_data)

    def get_address(self) -> Address:
        return self.address

    def set_data(self, *args: Any) -> "PredicateAccount":
        """Returns a predicate with the same bytecode and new input data."""
        return PredicateAccount(self._bytecode, self._abi, list(args), provider=self._provider)

    def unlock(self, private_key: Union[str, bytes], strict: bool = False) -> Account:
        raise InvalidKey("Predicate accounts are not controlled by a private key")

    def lock(self) -> "PredicateAccount":
        return self

    def _check_can_spend(self) -> None:
        return None

    def _predicate_data(self) -> Optional[PredicateData]:
        return PredicateData(bytecode=self._bytecode, input_data=self._input_data, abi=self._abi)

    def _witnesses(self, tx_id: bytes) -> List[bytes]:
        return []
