# MIT License
# Copyright (c) 2025 Hashborn

"""
Collaborator interfaces consumed by accounts.

Node transport, transaction serialization and broadcasting live outside this
package. Anything implementing these protocols can be attached to an account.
"""

from typing import List, Optional, Protocol, runtime_checkable

from ..protocol.crypto.addresses import Address
from ..protocol.types.coin import AssetBalance, Coin
from ..protocol.types.tx import TransferRequest


@runtime_checkable
class CoinQuery(Protocol):
    """Read access to ledger state."""

    def list_coins(self, owner: Address, asset_id: Optional[str] = None) -> List[Coin]:
        ...

    def get_balances(self, owner: Address) -> List[AssetBalance]:
        ...


@runtime_checkable
class TransactionHandle(Protocol):
    id: str

    def wait_for_result(self):
        ...


@runtime_checkable
class TransactionSender(Protocol):
    """Assembles, serializes and broadcasts transfer requests."""

    def transaction_id(self, request: TransferRequest) -> bytes:
        ...

    def send_transaction(self, request: TransferRequest, witnesses: List[bytes]) -> TransactionHandle:
        ...
