# MIT License
# Copyright (c) 2025 Hashborn

"""
Accounts: an address plus optional signing capability and ledger access.

A locked account only knows its address. An unlocked account also holds a
Signer. Any operation needing ledger state requires a provider; without one
it raises NoProviderConfigured before any remote call is attempted.
"""

import logging
from typing import Any, Iterable, List, Optional, Union

from ..protocol.config.params import BASE_ASSET_ID
from ..protocol.crypto.addresses import Address, addressify
from ..protocol.crypto.keys import SecretKey
from ..protocol.crypto.signer import Signer, hash_message
from ..protocol.types.coin import AssetBalance, Coin, SpendQuery, coin_quantities, normalize_asset_id
from ..protocol.types.common import InvalidKey, NoProviderConfigured, NoSigningKey
from ..protocol.types.tx import PredicateData, TransferRequest, TxParams
from ..observability import metrics
from . import resources
from .provider import CoinQuery, TransactionHandle, TransactionSender

logger = logging.getLogger(__name__)

QueryLike = Union[SpendQuery, dict]


def _to_spend_queries(queries: Iterable[QueryLike]) -> List[SpendQuery]:
    return [q if isinstance(q, SpendQuery) else SpendQuery.model_validate(q) for q in queries]


class Account:
    kind = "account"

    def __init__(self,
                 address: Union[Address, str],
                 provider: Optional[CoinQuery] = None,
                 signer: Optional[Signer] = None):
        self._address = address if isinstance(address, Address) else Address.from_string(address)
        self._provider = provider
        self._signer = signer

    # --- Constructors ---

    @classmethod
    def generate(cls, provider: Optional[CoinQuery] = None, entropy: Optional[bytes] = None) -> "Account":
        signer = Signer(SecretKey.generate(entropy))
        return cls(signer.address, provider, signer)

    @classmethod
    def from_private_key(cls, private_key: Union[str, bytes], provider: Optional[CoinQuery] = None) -> "Account":
        signer = Signer(private_key)
        return cls(signer.address, provider, signer)

    @classmethod
    def from_address(cls, address: Union[Address, str], provider: Optional[CoinQuery] = None) -> "Account":
        return cls(address, provider)

    # --- Identity ---

    @property
    def address(self) -> Address:
        return self._address

    @property
    def is_locked(self) -> bool:
        return self._signer is None

    @property
    def signer(self) -> Signer:
        if self._signer is None:
            raise NoSigningKey(f"Account {self._address} is locked")
        return self._signer

    @property
    def public_key(self) -> str:
        return self.signer.public_key

    @property
    def private_key(self) -> str:
        return self.signer.private_key

    def unlock(self, private_key: Union[str, bytes], strict: bool = False) -> "Account":
        """
        Returns an unlocked account for `private_key`.

        The result takes the key's own address. If that differs from this
        account's address a warning is logged, or InvalidKey raised when
        `strict` is set.
        """
        signer = Signer(private_key)
        if signer.address != self._address:
            if strict:
                signer.wipe()
                raise InvalidKey(f"Private key does not control {self._address}")
            logger.warning(f"Unlocking {self._address} with a key for {signer.address}; using the key's address")
        return Account(signer.address, self._provider, signer)

    def lock(self) -> "Account":
        """Wipes the key held by this account and returns a locked copy."""
        if self._signer is not None:
            self._signer.wipe()
            self._signer = None
        return Account(self._address, self._provider)

    # --- Provider ---

    @property
    def provider(self) -> CoinQuery:
        if self._provider is None:
            raise NoProviderConfigured()
        return self._provider

    def connect(self, provider: Optional[CoinQuery]) -> "Account":
        self._provider = provider
        return self

    # --- Signing ---

    def sign_message(self, message: Union[str, bytes]) -> bytes:
        return self.signer.sign(hash_message(message))

    def sign_transaction_id(self, tx_id: bytes) -> bytes:
        return self.signer.sign(tx_id)

    # --- Ledger queries ---

    def get_coins(self, asset_id: Optional[str] = None) -> List[Coin]:
        provider = self.provider
        if asset_id is not None:
            asset_id = normalize_asset_id(asset_id)
        return provider.list_coins(self._address, asset_id)

    def get_balance(self, asset_id: str = BASE_ASSET_ID) -> int:
        return sum(c.amount for c in self.get_coins(asset_id))

    def get_balances(self) -> List[AssetBalance]:
        return resources.normalize_balances(self.provider.get_balances(self._address))

    def get_resources_to_spend(self,
                               queries: Iterable[QueryLike],
                               excluded_ids: Optional[Iterable[str]] = None) -> List[Coin]:
        provider = self.provider
        return resources.select_resources(provider, self._address, _to_spend_queries(queries), excluded_ids)

    # --- Transfers ---

    def _sender(self) -> TransactionSender:
        provider = self.provider
        if not isinstance(provider, TransactionSender):
            raise NoProviderConfigured("Provider cannot send transactions")
        return provider

    def _check_can_spend(self) -> None:
        if self._signer is None:
            raise NoSigningKey(f"Account {self._address} is locked")

    def _predicate_data(self) -> Optional[PredicateData]:
        return None

    def _witnesses(self, tx_id: bytes) -> List[bytes]:
        return [self.sign_transaction_id(tx_id)]

    def transfer(self,
                 destination: Any,
                 amount: int,
                 asset_id: str = BASE_ASSET_ID,
                 tx_params: Optional[TxParams] = None) -> TransactionHandle:
        """Sends `amount` of `asset_id` to `destination`; change returns here."""
        if amount <= 0:
            raise ValueError(f"Transfer amount must be positive, got {amount}")
        sender = self._sender()
        self._check_can_spend()
        destination = addressify(destination)
        asset_id = normalize_asset_id(asset_id)

        inputs = self.get_resources_to_spend(coin_quantities(amount, asset_id))
        request = TransferRequest(
            inputs=inputs,
            destination=destination,
            amount=amount,
            asset_id=asset_id,
            change_to=self._address,
            params=tx_params or TxParams(),
            predicate=self._predicate_data(),
        )
        tx_id = sender.transaction_id(request)
        handle = sender.send_transaction(request, self._witnesses(tx_id))

        metrics.transfers_total.labels(kind=self.kind).inc()
        logger.info(f"Transfer {amount} of {asset_id} from {self._address} to {destination} submitted as {handle.id}")
        return handle

    def __repr__(self) -> str:
        state = "locked" if self.is_locked else "unlocked"
        return f"{type(self).__name__}({self._address}, {state})"
